"""
Token Filter - decide which vocabulary tokens may be sampled next.

LLM tokenizers work on tokens ("hello", " world", "123"), parsers work on
bytes. Before each sampling step we need the set of tokens whose bytes the
parser would accept from its current checkpoint.

Algorithm:
    For each token T in the vocabulary:
        1. Look up T's bytes (decoded once, up front)
        2. Reject T if its bytes conflict with the required continuation
           (cheap prefix comparison, rules out most tokens when the grammar
           demands a literal)
        3. Otherwise probe the parser with T's bytes from the current
           checkpoint; T is valid if the probe doesn't raise ParseError

Probing is speculative: the session's checkpoint is never modified, so all
probes start from the same state.

Example:
    ```python
    from transformers import AutoTokenizer
    from parse_guard.decoding import ParseSession, build_vocabulary, valid_token_ids

    tokenizer = AutoTokenizer.from_pretrained("gpt2")
    vocabulary = build_vocabulary(tokenizer)

    session = ParseSession(parser)
    allowed = valid_token_ids(session, vocabulary)
    ```
"""

import logging
from typing import Any, Dict, Optional, Set

from parse_guard.decoding.session import ParseSession
from parse_guard.parser.status import Finished

logger = logging.getLogger(__name__)


def decode_token(tokenizer: Any, token_id: int) -> bytes:
    """
    Decode a single token ID to the bytes it contributes to the output.

    Args:
        tokenizer: HuggingFace tokenizer or llama.cpp tokenizer
        token_id: Token ID

    Returns:
        bytes: UTF-8 bytes of the token text

    Raises:
        ValueError: If the tokenizer can't decode the token
    """
    try:
        # Different tokenizers have different decode methods
        if hasattr(tokenizer, 'decode'):
            token = tokenizer.decode([token_id])
        elif hasattr(tokenizer, 'id_to_piece'):
            # llama.cpp tokenizer
            token = tokenizer.id_to_piece(token_id)
        else:
            token = tokenizer.convert_ids_to_tokens(token_id)
    except Exception as e:
        raise ValueError(f"Cannot decode token {token_id}: {e}") from e

    if isinstance(token, (bytes, bytearray)):
        return bytes(token)
    return str(token).encode("utf-8")


def build_vocabulary(
    tokenizer: Any,
    special_tokens: Optional[Set[int]] = None
) -> Dict[int, bytes]:
    """
    Decode every token in the vocabulary once.

    Args:
        tokenizer: Tokenizer supporting len() and one of the decode APIs
        special_tokens: Token IDs to leave out (EOS, BOS, PAD)

    Returns:
        Dict mapping token_id -> token bytes

    Note:
        Tokens that fail to decode are skipped with a warning; they will
        never be allowed by the filter.
    """
    special_tokens = special_tokens or set()
    vocabulary: Dict[int, bytes] = {}

    vocab_size = len(tokenizer)
    logger.info(f"Decoding vocabulary of {vocab_size:,} tokens")

    for token_id in range(vocab_size):
        if token_id in special_tokens:
            continue
        try:
            vocabulary[token_id] = decode_token(tokenizer, token_id)
        except ValueError as e:
            logger.warning(str(e))

    logger.info(f"Decoded {len(vocabulary):,} tokens ({len(special_tokens)} special skipped)")
    return vocabulary


def valid_token_ids(session: ParseSession, vocabulary: Dict[int, bytes]) -> Set[int]:
    """
    Get the token IDs the parser accepts next.

    Args:
        session: Session holding the current checkpoint
        vocabulary: Token bytes from build_vocabulary()

    Returns:
        Set of valid token IDs (empty once the session has finished)

    Note:
        Empty tokens are never valid: they would not advance the parse.
        Neither are tokens that run past the end of the grammar.
    """
    if session.is_finished:
        return set()

    required = session.required_next
    valid = set()
    probes = 0

    for token_id, token in vocabulary.items():
        if not token:
            continue
        if required and not required.compatible_with(token):
            continue
        probes += 1
        outcome = session.probe(token)
        if outcome is None:
            continue
        # Bytes left over after the top-level parser finished fall outside the grammar
        if isinstance(outcome, Finished) and len(outcome.remaining) > 0:
            continue
        valid.add(token_id)

    logger.debug(
        f"Step {session.steps}: {len(valid)} valid of {len(vocabulary)} tokens "
        f"({probes} probed, required_next={required!r})"
    )
    return valid
