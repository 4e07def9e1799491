DEBUG_MODE = False  # Default to quiet; enable via set_debug(True) when needed


def set_debug(value):
    """
    Set debug mode on/off

    Args:
        value (bool): True to enable debugging, False to disable
    """
    global DEBUG_MODE
    DEBUG_MODE = value


def debug_print(text):
    """
    Prints the given text to the console for debugging purposes.

    Args:
        text (str): The text to print.
    """
    if DEBUG_MODE:
        print(text)


def make_word(high, low):
    """Combine two bytes into a 16-bit word (high byte first)"""
    return ((high & 0xFF) << 8) | (low & 0xFF)


def lo_byte(word):
    return word & 0xFF


def hi_byte(word):
    return (word >> 8) & 0xFF
