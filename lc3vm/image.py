"""
LC3 object images: big-endian 16-bit words, the first of which is the
origin where the rest are placed.
"""

from .errors import ImageError


def image_words(data):
    """
    Split image bytes into 16-bit big-endian words. An odd trailing
    byte is padded with a zero byte.
    """
    data = bytes(data)
    if len(data) % 2:
        data += b"\0"
    return [(data[i] << 8) | data[i + 1] for i in range(0, len(data), 2)]

def load_words(words, memory):
    """
    Place words[1:] at consecutive addresses starting at words[0].
    Returns (origin, count).
    """
    words = list(words)
    if not words:
        raise ImageError("image has no origin word")
    origin = words[0] & 0xFFFF
    count = memory.load(origin, words[1:])
    return origin, count

def load_image(data, memory):
    if len(data) < 2:
        raise ImageError("image is %d byte(s) long; an origin needs 2" % len(data))
    return load_words(image_words(data), memory)

def load_image_file(filename, memory):
    try:
        with open(filename, "rb") as fp:
            data = fp.read()
    except OSError as exc:
        raise ImageError("cannot read image '%s': %s" % (filename, exc.strerror or exc)) from exc
    try:
        return load_image(data, memory)
    except ImageError as exc:
        raise ImageError("%s: %s" % (filename, exc)) from exc

def parse_hex_words(text):
    """
    Parse a listing of hex words such as "x3000 x1261 ; comment" into
    a list of integers. Both xNNNN and 0xNNNN are accepted.
    """
    words = []
    for line_count, line in enumerate(text.splitlines(), 1):
        for word in line.split(';')[0].split():
            if word.lower().startswith("0x"):
                digits = word[2:]
            elif word[0] in "xX":
                digits = word[1:]
            else:
                digits = ""
            if not digits:
                raise ImageError('line %s: "%s" is not a hex word' % (line_count, word))
            try:
                value = int(digits, 16)
            except ValueError:
                raise ImageError('line %s: "%s" is not a hex word' % (line_count, word))
            if not 0 <= value <= 0xFFFF:
                raise ImageError('line %s: "%s" does not fit in 16 bits' % (line_count, word))
            words.append(value)
    return words
