import math


def sind(angle):
    """
    Sine of an angle given in degrees.

    Like MATLAB's ``sind`` the result is exact at multiples of 90 degrees,
    e.g. ``sind(180) == 0.0`` while ``math.sin(math.pi) == 1.2e-16``.
    """
    angle = angle % 360
    if angle % 90 == 0:
        return (0.0, 1.0, 0.0, -1.0)[int(angle // 90)]
    return math.sin(math.radians(angle))


def cosd(angle):
    """Cosine of an angle given in degrees, exact at multiples of 90 degrees."""
    angle = angle % 360
    if angle % 90 == 0:
        return (1.0, 0.0, -1.0, 0.0)[int(angle // 90)]
    return math.cos(math.radians(angle))


def atand(rise, run):
    """Four-quadrant arctangent in degrees."""
    return math.degrees(math.atan2(rise, run))
