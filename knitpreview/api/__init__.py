from knitpreview.api.preview import preview_chart, preview_pattern

__all__ = ["preview_chart", "preview_pattern"]
