"""lift531: 5/3/1 strength training calculator and progression tracker."""

__version__ = "0.1.0"
