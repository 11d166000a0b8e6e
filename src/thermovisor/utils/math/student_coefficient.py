from scipy import stats


def student_coefficient(degrees_of_freedom, probability, digits=3, side=2):
    """
    Evaluates Student's distribution coefficient.

    Parameters:
    - degrees_of_freedom : int
        Number of degrees of freedom.
    - probability : float
        Confidence level, e.g. 0.95.
    - digits : int, optional
        Number of decimal digits of the result. Default is 3.
    - side : int, optional
        2 for a two-sided interval (the quantile of (1 + probability) / 2),
        1 for a one-sided one. Default is 2.

    Returns:
    - t : float
        Student's quantile rounded to ``digits``.
    """
    if degrees_of_freedom < 1:
        raise ValueError(
            f"degrees_of_freedom should be positive, got {degrees_of_freedom}"
        )
    if side == 2:
        probability = (1 + probability) / 2
    return round(float(stats.t.ppf(probability, degrees_of_freedom)), digits)
