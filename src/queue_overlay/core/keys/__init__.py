from .codec import PropertyKeyCodec

__all__ = ["PropertyKeyCodec"]
