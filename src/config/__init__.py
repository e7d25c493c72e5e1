"""Config: load .env, expose DATA_DIR, OUTPUT_DIR, VAULT_ROOT and XMIND_* layout defaults."""
from .config import (
    load_env,
    get_data_dir,
    get_output_dir,
    get_vault_root,
    get_layout_algorithm,
    get_layout_direction,
    get_node_spacing,
    get_layer_spacing,
    get_default_node_width,
    get_default_node_height,
)

__all__ = [
    "load_env",
    "get_data_dir",
    "get_output_dir",
    "get_vault_root",
    "get_layout_algorithm",
    "get_layout_direction",
    "get_node_spacing",
    "get_layer_spacing",
    "get_default_node_width",
    "get_default_node_height",
]
