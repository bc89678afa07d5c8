"""
Heading arithmetic for endpoint headings.

Headings are compass degrees. The resampler only ever surfaces original
endpoint headings; this module tells it how two of them relate.
"""


def normalize_heading(heading: float) -> float:
    """
    Wrap a heading into [0, 360).

    Args:
        heading: Heading in degrees, any range

    Returns:
        float: Equivalent heading in [0, 360)
    """
    result = heading % 360
    # -1e-20 % 360 rounds to 360.0
    return 0.0 if result == 360 else result


def derivative_heading(from_heading: float, to_heading: float) -> float:
    """
    Signed smallest rotation from one heading to another.

    A half turn is ambiguous; it always resolves to -180, whichever heading
    comes first.

    Args:
        from_heading: Starting heading in degrees
        to_heading: Target heading in degrees

    Returns:
        float: Rotation in degrees within [-180, 180), positive is clockwise
    """
    delta = (to_heading - from_heading) % 360
    if delta >= 180:
        delta -= 360
    return delta

