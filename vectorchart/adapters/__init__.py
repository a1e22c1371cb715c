from vectorchart.adapters.normalize import to_value_collection

__all__ = ["to_value_collection"]
