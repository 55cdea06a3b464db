#!/usr/bin/env python
"""Module to load the parameters of a layer rate simulation from a config
file.

The config file uses the configobj format and is validated against a
"spec". The default spec, :data:`SCENARIO_SPEC`, has the parameters used
by :func:`.montecarlo.simulate_layer_rates`.
"""

from typing import Any, Dict, List, Optional

from configobj import ConfigObj, Section, flatten_errors
from validate import Validator

from .configobjvalidation import (integer_numpy_array_check,
                                  real_numpy_array_check)

__all__ = ["SCENARIO_SPEC", "load_scenario_file"]

SCENARIO_SPEC = """[Scenario]
SNR=real_numpy_array(default="0:5:35")
K=integer(min=1, default=2)
Nt=integer(min=1, default=2)
order=integer_numpy_array(min=0, default=list())
[General]
rep_max=integer(min=1, default=500)
seed=integer(min=0, default=0)
""".split("\n")


def _add_params(params: Dict[str, Any], config: Section) -> None:
    """
    Add the parameters in `config` (and in its sub-sections) to `params`.

    Parameters
    ----------
    params : dict
        The dictionary where the parameters will be added.
    config : configobj.ConfigObj | configobj.Section
        A ConfigObj object or a Section object.
    """
    for v in config.scalars:
        params[v] = config[v]

    for s in config.sections:
        _add_params(params, config[s])


def load_scenario_file(filename: str,
                       spec: Optional[List[str]] = None,
                       save_parsed_file: bool = False) -> Dict[str, Any]:
    """
    Load the parameters of a simulation from a config file using the
    configobj module.

    Parameters
    ----------
    filename : str
        Name of the config file.
    spec : list[str], optional
        A list of strings with the config spec. If not provided,
        `SCENARIO_SPEC` is used.
    save_parsed_file : bool
        If True, then the parsed config file will be written back to
        disk. This adds any missing values in the config file whose default
        values are provided in the `spec` and creates the file if it does
        not exist yet.

    Returns
    -------
    dict
        The parameters. Parameters in sections are added directly to the
        returned dictionary (the sections are flattened).

    Raises
    ------
    ValueError
        If a required parameter is missing or if a parameter is invalid.
    """
    if spec is None:
        spec = SCENARIO_SPEC

    conf_file_parser = ConfigObj(filename, list_values=True, configspec=spec)

    # Custom validation functions for numpy arrays
    fdict = {
        'real_numpy_array': real_numpy_array_check,
        'integer_numpy_array': integer_numpy_array_check,
    }
    validator = Validator(fdict)

    # The 'copy' argument makes the default values to be also written if
    # the ConfigObj object is saved.
    result = conf_file_parser.validate(validator,
                                       preserve_errors=True,
                                       copy=True)

    # flatten_errors only returns the parameters whose parsing failed
    errors_list = flatten_errors(conf_file_parser, result)
    if len(errors_list) != 0:
        section_list, key, error = errors_list[0]
        section = section_list[0] if section_list else 'root'
        if error is False:
            msg = ("Error loading file {0}. Parameter '{1}' in section "
                   "'{2}' must be provided.")
            raise ValueError(msg.format(filename, key, section))

        msg = ("Error loading file {0}. Parameter '{1}' in section "
               "'{2}' is invalid. {3}")
        raise ValueError(
            msg.format(filename, key, section,
                       str(error).capitalize()))

    if save_parsed_file:
        conf_file_parser.write()

    params: Dict[str, Any] = {}
    _add_params(params, conf_file_parser)
    return params
