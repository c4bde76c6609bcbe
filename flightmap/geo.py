"""Geographic helpers."""

import math


def wrap_longitude(longitude: float, reference: float) -> float:
    """
    Shift longitude by whole turns until it is within 180 degrees of reference.

    A repeating-world map draws several copies of each feature. When the
    user clicks a copy, the stored longitude can be off by a multiple of
    360 from the point actually clicked; this puts the popup back next to
    the click.
    """
    if not (math.isfinite(longitude) and math.isfinite(reference)):
        raise ValueError(f'Non-finite longitude: {longitude!r}, reference: {reference!r}')

    while abs(reference - longitude) > 180:
        longitude += 360 if reference > longitude else -360
    return longitude
