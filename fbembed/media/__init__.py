from fbembed.media.facebook import FacebookMediaSource

__all__ = ["FacebookMediaSource"]
