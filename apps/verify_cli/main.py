import argparse
import json
import logging
import sys

from factguard_core import config
from factguard_core.errors import FactguardError
from factguard_core.llm import TextGenerator
from factguard_core.models import Document
from factguard_store import get_store
from factguard_verify import SummaryCertifier, reverify_batch


def cmd_load(args, store):
    with open(args.file, encoding="utf-8") as f:
        payload = json.load(f)
    docs = payload if isinstance(payload, list) else [payload]
    for raw in docs:
        doc = store.put_document(Document.model_validate(raw))
        print(f"[+] Stored {doc.id} ({len(doc.source_content)} chars)")


def cmd_verify(args, store):
    certifier = SummaryCertifier(store, TextGenerator.from_config())
    outcome = certifier.run(args.document_id, force_regenerate=args.force)
    print(json.dumps(outcome.to_wire(), ensure_ascii=False, indent=2))


def cmd_reverify(args, store):
    certifier = SummaryCertifier(store, TextGenerator.from_config())
    report = reverify_batch(store, certifier, batch_size=args.batch_size, dry_run=args.dry_run)
    print(json.dumps(report, ensure_ascii=False, indent=2))


def main():
    p = argparse.ArgumentParser(description="Summary certification CLI")
    sub = p.add_subparsers(dest="command", required=True)

    p_load = sub.add_parser("load", help="Put one document or a list of documents (JSON) into the store")
    p_load.add_argument("file")
    p_load.set_defaults(func=cmd_load)

    p_verify = sub.add_parser("verify", help="Run the certification loop for one document")
    p_verify.add_argument("document_id")
    p_verify.add_argument("--force", action="store_true", help="Regenerate and restart the attempt budget")
    p_verify.set_defaults(func=cmd_verify)

    p_re = sub.add_parser("reverify", help="Re-run documents stuck in manual_review/rejected")
    p_re.add_argument("--batch-size", type=int, default=20)
    p_re.add_argument("--dry-run", action="store_true")
    p_re.set_defaults(func=cmd_reverify)

    args = p.parse_args()
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    try:
        args.func(args, get_store())
    except FactguardError as e:
        print(f"[error] {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
