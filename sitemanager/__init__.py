"""Site Manager API: favorites aggregation over the DynamoDB site tables."""

__version__ = "0.1.0"
