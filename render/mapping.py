# render/mapping.py

def map_range(value: float, in_lo: float, in_hi: float, out_lo: float, out_hi: float) -> float:
    """Affine map of ``value`` from [in_lo, in_hi] onto [out_lo, out_hi].

    Not clamped: values outside the input range extrapolate. ``in_lo == in_hi``
    raises ZeroDivisionError.
    """
    return out_lo + (value - in_lo) / (in_hi - in_lo) * (out_hi - out_lo)
