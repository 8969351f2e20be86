"""
Bilingual subtitle pipeline - English + Chinese SRT augmentation with an LLM.

A small pipeline for:
- Splitting SRT files into opaque subtitle blocks
- Grouping blocks into chunks of a minimum size
- Sending each chunk to the OpenAI Responses API with timeouts and retries
- Reassembling the translated chunks into a bilingual SRT file
"""

__version__ = "0.1.0"
