"""
Simple utilities shared across izhinet.
"""
from izhinet.utils.logging import get_logger, set_log_level, LEVELS
