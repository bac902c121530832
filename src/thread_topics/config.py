"""
Configuration defaults for thread topic discovery and labeling.
"""

DEFAULT_OUTPUT_DIR = "output/topics"

# Candidate extraction limits
DEFAULT_QUOTED_MIN_CHARS = 2
DEFAULT_QUOTED_MAX_CHARS = 60
DEFAULT_QUOTED_MAX_WORDS = 10
DEFAULT_TITLE_CASE_MIN_CHARS = 3
DEFAULT_ALL_CAPS_MIN_CHARS = 4
DEFAULT_LINE_MAX_CHARS = 60
DEFAULT_LINE_MAX_WORDS = 5
DEFAULT_ALT_MAX_CHARS = 60
DEFAULT_ALT_MAX_WORDS = 8
DEFAULT_SHORT_POST_MAX_CHARS = 80
DEFAULT_SHORT_POST_MAX_WORDS = 8
# Hashtags: glued lowercase tags shorter than this are left alone
DEFAULT_HASHTAG_SEGMENT_MIN_CHARS = 9
DEFAULT_HASHTAG_MAX_WORDS = 5

# Reaction / agreement tests only look at short posts
DEFAULT_REACTION_MAX_CHARS = 50
DEFAULT_REACTION_SHORT_CHARS = 15

# Discovery: evidence thresholds
DEFAULT_MIN_CONFIDENT_OVERALL = 1
DEFAULT_MIN_CONFIDENT_FOR_SHORT_TITLE = 2
DEFAULT_SHORT_TITLE_MAX_WORDS = 2
DEFAULT_LOW_CONFIDENCE_MIN_WORDS = 3
# Reverse-scan (incidental) patterns must be long enough to not be coincidence
DEFAULT_INCIDENTAL_MIN_CHARS = 12
DEFAULT_INCIDENTAL_MIN_WORDS = 3

# Discovery: disambiguation ratios (empirically tuned on gold-labeled threads)
DEFAULT_ALIAS_ALIGNMENT_RATIO = 0.6
DEFAULT_PREFIX_FRAGMENT_RATIO = 0.7
DEFAULT_PREFIX_FRAGMENT_MIN_POSTS = 3
DEFAULT_PREFIX_FRAGMENT_MAX_WORDS = 3
DEFAULT_MERGE_OVERLAP_RATIO = 0.85
DEFAULT_MERGE_MIN_WORDS = 2

# Link-title (embed) reverse matching
DEFAULT_EMBED_PATTERN_MIN_CHARS = 4
DEFAULT_EMBED_WORD_BOUNDARY_CHARS = 8
# Single-word song names at or above this Zipf frequency are too common to scan for.
# Set to 0 or negative to disable.
DEFAULT_EMBED_COMMON_WORD_ZIPF = 5.0

# Labeling
DEFAULT_MAX_INHERIT_DEPTH = 2

# Validation modes (see pipeline.choose_validation_mode)
DEFAULT_LIST_MIN_CONFIDENT_FOR_SHORT_TITLE = 1
DEFAULT_SELF_MIN_CONFIDENT_OVERALL = 2
DEFAULT_SELF_MAX_WORDS = 5
DEFAULT_SELF_MIN_KEY_CHARS = 3
DEFAULT_CATEGORY_MAX_WORDS = 3

# Link titles
DEFAULT_EMBED_TITLE_MAX_CHARS = 80
DEFAULT_EMBED_TITLE_MAX_WORDS = 12
