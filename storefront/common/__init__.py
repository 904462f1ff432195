# Common utilities
from .config_loader import (
    get_known_categories,
    load_care_instructions,
    load_categories,
    load_category_map,
    load_config,
    load_settings,
)
from .log_config import setup_logging
from .text_utils import collapse_whitespace, matches_search, name_initials
from .value_utils import (
    non_negative_int,
    parse_timestamp,
    positive_or,
    to_bool,
    to_number,
    to_string_list,
    to_text,
    unique_in_order,
)
