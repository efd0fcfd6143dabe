"""Modbus helpers: coil storage, hex-dump logging, IPv4 addresses, TCP client and target parsing."""

__version__ = "0.1.0"
__all__ = ["coildata", "logging_util", "ip_address", "tcp_client", "target"]