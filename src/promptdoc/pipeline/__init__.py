"""Prompt assembly pipeline."""

from promptdoc.pipeline.pipeline import PromptPipeline, assemble_prompt

__all__ = [
    "PromptPipeline",
    "assemble_prompt",
]
