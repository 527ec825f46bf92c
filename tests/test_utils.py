"""Common test utilities for vcdscout tests."""

from pathlib import Path


def get_repo_root() -> Path:
    """Get the repository root directory."""
    # This file is in tests/, so parent is the repo root
    return Path(__file__).parent.parent.resolve()


def get_test_inputs_dir() -> Path:
    return get_repo_root() / "test_inputs"


def get_test_input_path(filename: str) -> Path:
    """Get the absolute path to a test input file.
    
    Args:
        filename: Name of the file in test_inputs directory
        
    Returns:
        Absolute path to the test input file
        
    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    file_path = get_test_inputs_dir() / filename
    
    if not file_path.exists():
        raise FileNotFoundError(f"Test input file not found: {file_path}")
    
    return file_path


# Common test file constants
class TestFiles:
    """Constants for commonly used test files."""
    
    WIKIPEDIA_VCD = "wikipedia.vcd"
    NESTED_SCOPES_VCD = "nested_scopes.vcd"
