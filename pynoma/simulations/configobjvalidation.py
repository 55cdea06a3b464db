#!/usr/bin/env python
"""
Module implementing validation functions to define "specs" for configobj
validation.

This module is not intended to be used directly. The functions defined here
are registered in the validator used by :mod:`.parameters`.
"""

from typing import Any, Callable, List, Optional, Union

import numpy as np
import validate

__all__ = ["real_numpy_array_check", "integer_numpy_array_check"]

Number = Union[int, float]


def _parse_range_expr(value: str,
                      converter: Callable[[str], Number]) -> np.ndarray:
    """
    Parse a string in the form of min:max or min:step:max and return a
    numpy array.

    Parameters
    ----------
    value : str
        The string to be parsed.
    converter : callable
        function that converts a string representation to a number.

    Returns
    -------
    np.ndarray
        The parsed numpy array.

    Examples
    --------
    >>> print(_parse_range_expr('0:5:20', float))
    [ 0.  5. 10. 15.]
    """
    try:
        limits = [converter(i) for i in value.split(':')]
    except (ValueError, AttributeError):
        raise validate.VdtTypeError(value)

    if len(limits) == 2:
        return np.arange(limits[0], limits[1])
    if len(limits) == 3:
        return np.arange(limits[0], limits[2], limits[1])
    raise validate.VdtTypeError(value)


def _split_list(value: Any) -> Any:
    """
    Convert a string in the form '[a b c]' or '[a, b, c]' into a list of
    strings. Any other value is returned unchanged.
    """
    if isinstance(value, str) and value[:1] == '[' and value[-1:] == ']':
        return value[1:-1].replace(',', ' ').split()
    return value


def _numpy_array_check(value: Any, scalar_check: Callable[[Any], Number],
                       converter: Callable[[str], Number],
                       min: Optional[Number],
                       max: Optional[Number]) -> np.ndarray:
    """
    Common implementation of the `real_numpy_array_check` and
    `integer_numpy_array_check` functions.

    Parameters
    ----------
    value : str | list[str]
        The value to be parsed.
    scalar_check : callable
        validate function used to parse a single number.
    converter : callable
        Function converting a string to a number (used in range
        expressions).
    min : int | float, optional
        The minimum allowed value.
    max : int | float, optional
        The maximum allowed value.

    Returns
    -------
    np.ndarray
        The parsed numpy array.
    """
    value = _split_list(value)

    if isinstance(value, list):
        # Each element can be either a number or a range expression
        parts = [
            _numpy_array_check(a, scalar_check, converter, None, None)
            for a in value
        ]
        out = np.hstack(parts) if parts else np.array([])
    else:
        try:
            out = np.array([scalar_check(value)])
        except validate.VdtTypeError:
            out = _parse_range_expr(value, converter)

    if out.size > 0:
        # min and max may be passed as strings in the spec
        if min is not None and out.min() < converter(str(min)):
            raise validate.VdtValueTooSmallError(out.min())
        if max is not None and out.max() > converter(str(max)):
            raise validate.VdtValueTooBigError(out.max())

    return out


# pylint: disable= W0622
# noinspection PyShadowingBuiltins
def real_numpy_array_check(value: Union[str, List[str]],
                           min: Optional[float] = None,
                           max: Optional[float] = None) -> List[float]:
    """
    Parse and validate `value` as a numpy array (of floats).

    Value can be either a single number, a range expression in the form of
    min:max or min:step:max, or even a list containing numbers and range
    expressions.

    Parameters
    ----------
    value : str | list[str]
        The value to be converted.
    min : float
        The minimum allowed value. If the converted value is (or have)
        lower than `min` then the VdtValueTooSmallError exception will be
        raised.
    max : float
        The maximum allowed value. If the converted value is (or have)
        greater than `max` then the VdtValueTooBigError exception will be
        raised.

    Returns
    -------
    List[float]
        The parsed values.

    Notes
    -----
    You can either separate the values with commas or spaces (any comma
    will have the same effect as a space). However, if you separate with
    spaces the values should be in brackets, while if you separate with
    commas there should be no brackets.

    >> SNR = 0,5,10:20
    >> SNR = [0 5 10:20]

    Examples
    --------
    >>> real_numpy_array_check(['0', '10:5:25'])
    [0.0, 10.0, 15.0, 20.0]
    >>> real_numpy_array_check('[1.5 3]')
    [1.5, 3.0]
    """
    return _numpy_array_check(value, validate.is_float, float, min,
                              max).astype(float).tolist()


# noinspection PyShadowingBuiltins
def integer_numpy_array_check(value: Union[str, List[str]],
                              min: Optional[int] = None,
                              max: Optional[int] = None) -> List[int]:
    """
    Parse and validate `value` as a numpy array (of integers).

    Value can be either a single number, a range expression in the form of
    min:max or min:step:max, or even a list containing numbers and range
    expressions.

    Parameters
    ----------
    value : str | list[str]
        The value to be converted.
    min : int
        The minimum allowed value.
    max : int
        The maximum allowed value.

    Returns
    -------
    List[int]
        The parsed values.

    Examples
    --------
    >>> integer_numpy_array_check('2:5')
    [2, 3, 4]
    >>> integer_numpy_array_check(['1', '0'])
    [1, 0]
    """
    return _numpy_array_check(value, validate.is_integer, int, min,
                              max).astype(int).tolist()
