"""Loading and saving household assumptions.

Each program is a folder under ``input-parameters`` containing a
``spec.json`` with the camelCase assumption fields.
"""

import json
import os

from loguru import logger

from model.ProjectionData import Inputs


# Default base path: the repository root
DEFAULT_BASE_PATH = os.path.normpath(os.path.join(os.path.dirname(__file__), '..'))


def spec_path_for(program_name: str, base_path: str = DEFAULT_BASE_PATH) -> str:
    return os.path.join(base_path, 'input-parameters', program_name, 'spec.json')


def save_spec(spec: dict, program_name: str, base_path: str = DEFAULT_BASE_PATH) -> str:
    """Write a camelCase assumption dict to the program's spec.json.

    Creates the program folder when needed and returns the written path.
    """
    spec_path = spec_path_for(program_name, base_path)
    os.makedirs(os.path.dirname(spec_path), exist_ok=True)
    with open(spec_path, 'w') as f:
        json.dump(spec, f, indent=4)
    logger.debug(f"Saved program '{program_name}' to {spec_path}")
    return spec_path


def load_inputs(program_name: str, base_path: str = DEFAULT_BASE_PATH) -> Inputs:
    """Load a program's assumptions.

    Raises:
        FileNotFoundError: If the program has no spec.json
        json.JSONDecodeError: If the spec is not valid JSON
        ValueError: If the spec is not a JSON object
    """
    spec_path = spec_path_for(program_name, base_path)
    if not os.path.exists(spec_path):
        raise FileNotFoundError(f"Spec file not found: {spec_path}")
    with open(spec_path, 'r') as f:
        spec = json.load(f)
    if not isinstance(spec, dict):
        raise ValueError(f"Spec file {spec_path} must contain a JSON object")
    logger.debug(f"Loaded program '{program_name}' from {spec_path}")
    return Inputs.from_dict(spec)


def save_inputs(inputs: Inputs, program_name: str, base_path: str = DEFAULT_BASE_PATH) -> str:
    return save_spec(inputs.to_dict(), program_name, base_path)


def list_existing_programs(base_path: str = DEFAULT_BASE_PATH) -> list[str]:
    """List all existing programs in the input-parameters directory.
    
    Args:
        base_path: Base path containing the input-parameters directory
        
    Returns:
        Sorted list of program names
    """
    input_params_path = os.path.join(base_path, 'input-parameters')
    if not os.path.exists(input_params_path):
        return []
    
    programs = []
    for name in os.listdir(input_params_path):
        program_dir = os.path.join(input_params_path, name)
        spec_path = os.path.join(program_dir, 'spec.json')
        if os.path.isdir(program_dir) and os.path.exists(spec_path):
            programs.append(name)
    
    return sorted(programs)
