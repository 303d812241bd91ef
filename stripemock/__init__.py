"""In-process fake of a payment API's plan and product resources."""

__version__ = "0.1.0"
