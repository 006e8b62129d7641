from fastapi import Depends

from factguard_core.llm import TextGenerator
from factguard_store import DocumentStore, get_store as _get_store
from factguard_verify import SummaryCertifier


def get_text_generator() -> TextGenerator:
    return TextGenerator.from_config()


def get_store() -> DocumentStore:
    return _get_store()


def get_certifier(llm: TextGenerator = Depends(get_text_generator),
                  store: DocumentStore = Depends(get_store)) -> SummaryCertifier:
    return SummaryCertifier(store, llm)
