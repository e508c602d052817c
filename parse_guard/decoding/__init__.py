"""
Constrained decoding driver module.

This module connects the parser core to token-by-token generation: it keeps
the parser's checkpoint across decoding steps and turns the parser's answers
into a token mask.

Components:
    - session: ParseSession, the per-generation driver loop state
    - token_filter: Decode the vocabulary and find the tokens a checkpoint accepts
    - logits_processor: HuggingFace LogitsProcessor that masks invalid tokens

Key Algorithm - Token Filtering:
    For each token T in the vocabulary:
    1. Skip T if its bytes conflict with the required continuation
    2. Probe the parser with T's bytes from the current checkpoint
    3. T is valid if the probe doesn't fail

Probes never modify the checkpoint, so the whole vocabulary is checked
against the same state.

Example:
    ```python
    from parse_guard.decoding import ParseSession, build_vocabulary, valid_token_ids

    session = ParseSession(parser)
    vocabulary = build_vocabulary(tokenizer)

    allowed = valid_token_ids(session, vocabulary)
    session.feed(vocabulary[next(iter(allowed))])
    ```
"""

from parse_guard.decoding.session import ParseSession, SessionFinishedError
from parse_guard.decoding.token_filter import build_vocabulary, decode_token, valid_token_ids
from parse_guard.decoding.logits_processor import StructuredLogitsProcessor

__all__ = [
    "ParseSession",
    "SessionFinishedError",
    "build_vocabulary",
    "decode_token",
    "valid_token_ids",
    "StructuredLogitsProcessor",
]
