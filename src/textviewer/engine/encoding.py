"""Byte-sample encoding detection.

Classifies the first kilobyte of a file into one of the supported
EncodingLabels. Detection never fails: an inconclusive sample falls back to
EUC-KR, the usual encoding of legacy Korean text files.
"""

import logging
from dataclasses import dataclass

from textviewer.models import EncodingLabel

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 1024

BOMS = (
    (b"\xef\xbb\xbf", EncodingLabel.UTF_8),
    (b"\xfe\xff", EncodingLabel.UTF_16BE),
    (b"\xff\xfe", EncodingLabel.UTF_16LE),
)

HANGUL_SYLLABLES = range(0xAC00, 0xD7AF + 1)


@dataclass
class EncodingScores:
    """Counters gathered by the heuristic scoring pass."""

    high_bit_bytes: int = 0
    euc_kr_score: int = 0
    utf8_score: int = 0
    valid_utf8_sequences: int = 0
    invalid_utf8_sequences: int = 0


def detect_encoding(sample: bytes) -> EncodingLabel:
    """Guess the encoding of a byte sample.

    Args:
        sample: Raw bytes; only the first SAMPLE_SIZE bytes are inspected

    Returns:
        The best-effort EncodingLabel for the sample
    """
    sample = bytes(sample[:SAMPLE_SIZE])

    for bom, label in BOMS:
        if sample.startswith(bom):
            logger.debug("BOM found: %s", label)
            return label

    # Fast path: pure ASCII is valid UTF-8
    if sample.isascii():
        return EncodingLabel.UTF_8

    scores = score_sample(sample)
    label = _decide(scores)
    logger.debug("Detected %s from %s", label, scores)
    return label


def score_sample(sample: bytes) -> EncodingScores:
    """Score a sample for EUC-KR and UTF-8 in a single left-to-right pass.

    Each high-bit byte is checked both as the first byte of an EUC-KR pair
    and as a UTF-8 lead byte; the scan then skips whatever the longer of the
    two interpretations consumed.
    """
    scores = EncodingScores()
    size = len(sample)
    i = 0

    while i < size:
        byte = sample[i]
        if byte < 0x80:
            i += 1
            continue

        scores.high_bit_bytes += 1
        step = 1

        if i + 1 < size:
            trail = sample[i + 1]
            if 0xA1 <= trail <= 0xFE:
                if 0xB0 <= byte <= 0xC8:
                    # Complete Hangul syllable range
                    scores.euc_kr_score += 2
                    step = 2
                elif 0xA1 <= byte <= 0xAC:
                    scores.euc_kr_score += 1
                    step = 2

        if byte >= 0xC0:
            step = max(step, _score_utf8_sequence(sample, i, scores))

        i += step

    return scores


def _score_utf8_sequence(sample: bytes, start: int, scores: EncodingScores) -> int:
    """Check the UTF-8 sequence led by sample[start]; return bytes consumed."""
    lead = sample[start]
    if lead & 0xE0 == 0xC0:
        continuation, code_point = 1, lead & 0x1F
    elif lead & 0xF0 == 0xE0:
        continuation, code_point = 2, lead & 0x0F
    elif lead & 0xF8 == 0xF0:
        continuation, code_point = 3, lead & 0x07
    else:
        scores.invalid_utf8_sequences += 1
        return 1

    end = start + 1 + continuation
    if end > len(sample):
        # Cut off by the end of the sample: not evidence either way
        return len(sample) - start

    for byte in sample[start + 1 : end]:
        if byte & 0xC0 != 0x80:
            scores.invalid_utf8_sequences += 1
            return 1
        code_point = (code_point << 6) | (byte & 0x3F)

    scores.valid_utf8_sequences += 1
    # Only three-byte sequences carry score; Hangul syllables all live there
    if continuation == 2:
        if code_point in HANGUL_SYLLABLES:
            scores.utf8_score += 3
        elif code_point >= 0x80:
            scores.utf8_score += 1
    return end - start


def _decide(scores: EncodingScores) -> EncodingLabel:
    if scores.high_bit_bytes == 0:
        return EncodingLabel.UTF_8
    if (
        scores.valid_utf8_sequences > 0
        and scores.invalid_utf8_sequences == 0
        and scores.utf8_score > 0
    ):
        return EncodingLabel.UTF_8
    if scores.euc_kr_score > scores.utf8_score and scores.euc_kr_score > 0:
        return EncodingLabel.EUC_KR
    if scores.utf8_score > 0:
        return EncodingLabel.UTF_8
    # Ambiguous high-bit content: assume legacy Korean text
    return EncodingLabel.EUC_KR
