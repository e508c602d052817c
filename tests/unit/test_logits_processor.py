"""
Unit tests for StructuredLogitsProcessor.
"""

import pytest
import torch

from parse_guard.decoding import StructuredLogitsProcessor
from parse_guard.parser import LiteralParser

VOCAB = ["a", "b", "ab", "  ", " ", "1", "12", "", "<eos>"]
EOS = 8
PROMPT = 7


class FakeTokenizer:
    """Minimal HuggingFace-style tokenizer over a fixed vocabulary."""

    eos_token_id = EOS
    all_special_ids = [EOS]

    def __len__(self):
        return len(VOCAB)

    def decode(self, ids):
        return "".join(VOCAB[i] for i in ids)


@pytest.fixture
def processor():
    return StructuredLogitsProcessor(
        LiteralParser("ab"),
        FakeTokenizer(),
        prompt_length=1
    )


def allowed(scores, row=0):
    """Token IDs left unmasked in one row."""
    return {i for i, value in enumerate(scores[row].tolist()) if value != float('-inf')}


class TestStructuredLogitsProcessor:
    """Test grammar masking during generation."""

    def test_special_tokens_detected(self, processor):
        assert processor.special_tokens == {EOS}
        assert processor.eos_token_id == EOS
        assert EOS not in processor.vocabulary

    def test_first_step(self, processor):
        """Test only tokens starting the literal survive and EOS is masked."""
        scores = processor(torch.tensor([[PROMPT]]), torch.zeros(1, len(VOCAB)))

        assert allowed(scores) == {0, 2}

    def test_follows_generated_tokens(self, processor):
        processor(torch.tensor([[PROMPT]]), torch.zeros(1, len(VOCAB)))
        scores = processor(torch.tensor([[PROMPT, 0]]), torch.zeros(1, len(VOCAB)))

        assert allowed(scores) == {1}

    def test_eos_once_finished(self, processor):
        processor(torch.tensor([[PROMPT]]), torch.zeros(1, len(VOCAB)))
        processor(torch.tensor([[PROMPT, 0]]), torch.zeros(1, len(VOCAB)))
        scores = processor(torch.tensor([[PROMPT, 0, 1]]), torch.zeros(1, len(VOCAB)))

        assert allowed(scores) == {EOS}

    def test_eos_when_stopping_is_legal(self):
        processor = StructuredLogitsProcessor(
            LiteralParser("a").repeat(),
            FakeTokenizer(),
            prompt_length=1
        )
        scores = processor(torch.tensor([[PROMPT, 0]]), torch.zeros(1, len(VOCAB)))

        # "ab" and "b" would leave bytes after the repetition ends
        assert allowed(scores) == {0, EOS}

    def test_rows_tracked_independently(self, processor):
        scores = processor(
            torch.tensor([[PROMPT, 0], [PROMPT, 2]]),
            torch.zeros(2, len(VOCAB))
        )

        assert allowed(scores, row=0) == {1}
        assert allowed(scores, row=1) == {EOS}

    def test_stats_and_reset(self, processor):
        processor(torch.tensor([[PROMPT, 0]]), torch.zeros(1, len(VOCAB)))
        stats = processor.get_stats()

        assert stats['vocab_size'] == len(VOCAB) - 1
        assert stats['rows'][0]['steps'] == 1
        assert stats['rows'][0]['required_next'] == b"b"
        assert not stats['rows'][0]['can_stop']

        processor.reset()

        assert processor.get_stats()['rows'] == {}
        assert processor.processed_lengths == {}
