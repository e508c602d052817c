"""
Logits Processor - mask tokens the grammar doesn't allow during generation.

This module implements the HuggingFace LogitsProcessor protocol on top of a
parser. At each step the model produces logits for every token; we set the
logits of tokens the parser would reject to -inf, so only grammar-conforming
tokens can be sampled.

Flow:
    1. Model generates logits for all tokens
    2. LogitsProcessor is called with (input_ids, scores)
    3. New tokens since the last call are fed to the row's ParseSession
    4. The session's checkpoint is probed with every candidate token
    5. Invalid tokens get -inf; EOS is allowed only where stopping is legal
    6. Model samples from the masked logits

Usage:
    ```python
    from transformers import AutoModelForCausalLM, AutoTokenizer
    from parse_guard.decoding import StructuredLogitsProcessor
    from parse_guard.parser import IntegerParser, LiteralParser

    model = AutoModelForCausalLM.from_pretrained("gpt2")
    tokenizer = AutoTokenizer.from_pretrained("gpt2")

    parser = LiteralParser("Answer: ").ignore_output_then(IntegerParser(0, 100))
    processor = StructuredLogitsProcessor(
        parser, tokenizer, prompt_length=input_ids.shape[1]
    )

    output = model.generate(
        input_ids,
        logits_processor=[processor],
        max_new_tokens=20
    )
    ```
"""

import logging
from typing import Any, Dict, Optional, Set

import torch
from torch import Tensor

from parse_guard.decoding.session import ParseSession
from parse_guard.decoding.token_filter import build_vocabulary, decode_token, valid_token_ids
from parse_guard.parser.base import Parser
from parse_guard.parser.status import ParseError

logger = logging.getLogger(__name__)


class StructuredLogitsProcessor:
    """
    LogitsProcessor that enforces a parser's grammar via token masking.

    This implements the HuggingFace LogitsProcessor interface:
        __call__(input_ids: Tensor, scores: Tensor) -> Tensor

    Each batch row gets its own ParseSession, advanced incrementally with the
    tokens generated since the previous call.

    Attributes:
        parser: Top-level parser the output must match
        tokenizer: Tokenizer for decoding token IDs
        vocabulary: Token ID -> bytes for every non-special token
        sessions: One ParseSession per batch row
        allow_eos_when_valid: Allow EOS token when stopping is legal
    """

    def __init__(
        self,
        parser: Parser,
        tokenizer: Any,
        allow_eos_when_valid: bool = True,
        special_tokens: Optional[Set[int]] = None,
        prompt_length: int = 0,
        vocabulary: Optional[Dict[int, bytes]] = None
    ):
        """
        Initialize StructuredLogitsProcessor.

        Args:
            parser: Parser describing the allowed output
            tokenizer: Tokenizer for decoding token IDs
            allow_eos_when_valid: Allow EOS token when the parse may stop
            special_tokens: Set of special token IDs to skip when tracking
            prompt_length: Number of prompt tokens to skip
            vocabulary: Pre-decoded vocabulary (built from tokenizer if None)
        """
        self.parser = parser
        self.tokenizer = tokenizer
        self.allow_eos_when_valid = allow_eos_when_valid

        if special_tokens is None:
            special_tokens = self._get_special_tokens()
        self.special_tokens = special_tokens

        self.eos_token_id = getattr(tokenizer, 'eos_token_id', None)

        if vocabulary is None:
            vocabulary = build_vocabulary(tokenizer, special_tokens)
        self.vocabulary = vocabulary

        self.prompt_length = prompt_length
        self.sessions: Dict[int, ParseSession] = {}
        self.processed_lengths: Dict[int, int] = {}

        logger.debug(
            f"StructuredLogitsProcessor initialized "
            f"(vocab={len(self.vocabulary)}, EOS={self.eos_token_id}, prompt_length={prompt_length})"
        )

    def _get_special_tokens(self) -> Set[int]:
        """Get set of special token IDs from tokenizer."""
        special = set()

        # HuggingFace tokenizer
        if hasattr(self.tokenizer, 'all_special_ids'):
            special.update(self.tokenizer.all_special_ids)

        for attr in ['eos_token_id', 'bos_token_id', 'pad_token_id', 'unk_token_id']:
            token_id = getattr(self.tokenizer, attr, None)
            if token_id is not None:
                special.add(token_id)

        return special

    def __call__(self, input_ids: Tensor, scores: Tensor) -> Tensor:
        """
        Mask tokens that would break the grammar.

        Args:
            input_ids: Tensor of shape (batch_size, seq_len) with generated tokens
            scores: Tensor of shape (batch_size, vocab_size) with logits

        Returns:
            Tensor: Scores with invalid tokens set to -inf (modified in place)
        """
        batch_size = input_ids.shape[0]
        vocab_size = scores.shape[1]

        for batch_idx in range(batch_size):
            session = self._update_session(batch_idx, input_ids[batch_idx])

            valid_tokens = {
                t for t in valid_token_ids(session, self.vocabulary) if t < vocab_size
            }
            allow_eos = self._allow_eos(session, valid_tokens)

            mask = self._create_mask(valid_tokens, vocab_size, scores.device)
            if self.eos_token_id is not None and self.eos_token_id < vocab_size:
                mask[self.eos_token_id] = not allow_eos

            scores[batch_idx, mask] = float('-inf')

        return scores

    def _allow_eos(self, session: ParseSession, valid_tokens: Set[int]) -> bool:
        if session.is_finished:
            return True
        if self.allow_eos_when_valid and session.can_stop:
            return True
        if not valid_tokens:
            # Nothing in the vocabulary can continue; end rather than mask everything
            logger.warning(
                f"No token can continue the parse at step {session.steps} "
                f"(required_next={session.required_next!r}); allowing EOS"
            )
            return True
        return False

    def _update_session(self, batch_idx: int, input_ids: Tensor) -> ParseSession:
        """
        Feed the row's new tokens to its session.

        Only tokens generated since the previous call are processed, skipping
        the prompt by position.
        """
        session = self.sessions.get(batch_idx)
        if session is None:
            session = ParseSession(self.parser)
            self.sessions[batch_idx] = session

        current_length = len(input_ids)
        start_idx = max(self.processed_lengths.get(batch_idx, 0), self.prompt_length)
        new_tokens = input_ids[start_idx:current_length].tolist()

        for token_id in new_tokens:
            if token_id in self.special_tokens or session.is_finished:
                continue

            token = self.vocabulary.get(token_id)
            if token is None:
                token = decode_token(self.tokenizer, token_id)

            try:
                session.feed(token)
            except ParseError as e:
                logger.warning(
                    f"Generated token {token_id} ({token!r}) violates the grammar: {e.message}"
                )

        self.processed_lengths[batch_idx] = current_length
        return session

    def _create_mask(
        self,
        valid_tokens: Set[int],
        vocab_size: int,
        device: torch.device
    ) -> Tensor:
        """
        Create boolean mask for invalid tokens.

        Returns:
            Tensor: Boolean mask where True = invalid (should be masked)
        """
        mask = torch.ones(vocab_size, dtype=torch.bool, device=device)

        if valid_tokens:
            valid_indices = torch.tensor(sorted(valid_tokens), device=device, dtype=torch.long)
            mask[valid_indices] = False

        return mask

    def reset(self) -> None:
        """
        Reset processor state for a new generation.

        Example:
            ```python
            output1 = model.generate(..., logits_processor=[processor])
            processor.reset()
            output2 = model.generate(..., logits_processor=[processor])
            ```
        """
        self.sessions.clear()
        self.processed_lengths.clear()
        logger.debug("StructuredLogitsProcessor reset")

    def get_stats(self) -> dict:
        """
        Get statistics about processor usage.

        Returns:
            Dict with per-row session state and vocabulary size
        """
        return {
            'vocab_size': len(self.vocabulary),
            'rows': {
                batch_idx: {
                    'steps': session.steps,
                    'finished': session.is_finished,
                    'can_stop': session.can_stop,
                    'required_next': session.required_next.tobytes(),
                }
                for batch_idx, session in self.sessions.items()
            }
        }

    def __repr__(self) -> str:
        return (
            f"StructuredLogitsProcessor("
            f"rows={len(self.sessions)}, vocab={len(self.vocabulary)})"
        )
