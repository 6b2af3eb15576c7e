"""JSON-RPC 2.0 data types, pubsub bookkeeping and EIP-1559 fee estimation."""

__version__ = "0.1.0"