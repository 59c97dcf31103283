"""Currency converter: cached exchange-rate lookup behind a small FastAPI app."""

__version__ = "1.0.0"
