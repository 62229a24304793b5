from __future__ import annotations

from common.types import Config, DataSnapshot, RenderContext
from common.utils import decimal_str, utc_date


def build_context(config: Config, snapshot: DataSnapshot) -> RenderContext:
    """
    Values for the `index` template. Pure: depends only on the arguments.
    No escaping happens here; Jinja2 autoescaping handles the HTML side.
    """
    return RenderContext(
        latitude=decimal_str(config.latitude),
        longitude=decimal_str(config.longitude),
        data=snapshot.contents,
        time=utc_date(snapshot.modified_at),
    )
