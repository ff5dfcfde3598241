# utils.py
"""
Utility functions for the simulation framework.

This module provides helper functions, such as logging setup, config
loading and coordinate scaling, that are used across different parts of
the application but do not belong to a specific domain like physics or
rendering.
"""
import logging
import logging.handlers
import json
import os
from typing import Any, Callable, Dict, Tuple
from constants import LAYOUTS

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Side Effects: Configures the root Python logger. Creates a log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.
#
# validate_config(config: Dict[str, Any]) -> None:
#   - Raises ValueError (after a CRITICAL log) on the first invalid value.
#
# linear_scale(domain, codomain) -> Callable[[float], float]:
#   - Invariants: the returned mapping is affine and sends domain[0] to
#     codomain[0] and domain[1] to codomain[1].

def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the root logger from the "logging" section of the config.

    Log records go to the console and to a rotating file (1 MiB, five
    backups) whose directory is created on demand. Calling it again
    replaces the previous handlers, so a test or a restarted run never
    writes each record twice.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/simulation.log')

    # Ensure the log directory exists
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Rotates when the log reaches 1MB, keeps 5 backup logs.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")

def load_config(path: str) -> Dict[str, Any]:
    """
    Reads the JSON config named on the command line (or `config.json`).

    Missing files and malformed JSON are logged and re-raised so the
    driver can report them as fatal.
    """
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
        logging.info("Configuration loaded successfully.")
        return config
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

def _reject(msg: str) -> None:
    logging.critical(f"Configuration error: {msg}")
    raise ValueError(f"Configuration error: {msg}")

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

def validate_config(config: Dict[str, Any]) -> None:
    """
    Checks the values that the simulation cannot run without.

    Missing keys are allowed; they fall back to the application constants.
    """
    sim = config.get('simulation_parameters', {})

    count = sim.get('particle_count', 1)
    if not isinstance(count, int) or isinstance(count, bool) or count < 1:
        _reject(f"particle_count must be a positive integer, got {count!r}.")

    for key in ('domain_half_extent', 'tick_interval'):
        value = sim.get(key, 1.0)
        if not _is_number(value) or value <= 0:
            _reject(f"{key} must be a positive number, got {value!r}.")

    threshold = sim.get('proximity_threshold', 0.0)
    if not _is_number(threshold) or threshold < 0:
        _reject(f"proximity_threshold must be a non-negative number, got {threshold!r}.")

    layout = sim.get('layout', LAYOUTS[0])
    if layout not in LAYOUTS:
        _reject(f"layout must be one of {LAYOUTS}, got {layout!r}.")

    velocity = sim.get('initial_velocity', (0.0, 0.0))
    if (not isinstance(velocity, (list, tuple)) or len(velocity) != 2
            or not all(_is_number(v) for v in velocity)):
        _reject(f"initial_velocity must be a pair of numbers, got {velocity!r}.")

    seed = sim.get('seed')
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
        _reject(f"seed must be an integer or null, got {seed!r}.")

    run = config.get('run_control', {})
    for key, minimum in (('log_throttle_steps', 1), ('max_steps', 0)):
        value = run.get(key, minimum)
        if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
            _reject(f"{key} must be an integer >= {minimum}, got {value!r}.")

    logging.info("Configuration validated.")

def linear_scale(
    domain: Tuple[float, float], codomain: Tuple[float, float]
) -> Callable[[float], float]:
    """
    Returns a function mapping `domain` linearly onto `codomain`.

    output = (max_out - min_out) * (value - min_in) / (max_in - min_in) + min_out
    """
    min_input, max_input = domain
    min_output, max_output = codomain

    def scale(value: float) -> float:
        return (
            (max_output - min_output)
            * (value - min_input)
            / (max_input - min_input)
            + min_output
        )

    return scale
