"""utilities — gauge constants and yarn-width validation."""

from knitpreview.utilities.gauge import (
    GAUGE,
    InvalidWidthError,
    check_yarn_width,
    max_yarn_width,
    row_height,
)

__all__ = ["GAUGE", "InvalidWidthError", "check_yarn_width", "max_yarn_width", "row_height"]
