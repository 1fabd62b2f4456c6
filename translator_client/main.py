# translator_client/main.py
from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from translator_client.core.config import get_settings
from translator_client.core.errors import TranslatorError
from translator_client.core.logging import configure_logging
from translator_client.models import LANGUAGES, SelectedFile
from translator_client.services.token_provider import CognitoTokenProvider
from translator_client.session import TranslatorSession
from translator_client.utils.file_utils import describe_file

logger = configure_logging()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="رفع ملفات PDF للترجمة ومتابعة حالتها.")
    sub = p.add_subparsers(dest="command", required=True)

    submit = sub.add_parser("submit", help="رفع ملف PDF للترجمة")
    submit.add_argument("file", type=Path)
    submit.add_argument("--language", default=None, choices=[language.code for language in LANGUAGES])

    sub.add_parser("jobs", help="عرض مهام الترجمة")

    download = sub.add_parser("download", help="فتح رابط تنزيل مهمة مكتملة")
    download.add_argument("job_id")
    return p


async def _sign_in(provider: CognitoTokenProvider) -> None:
    username = os.getenv("TRANSLATOR_USERNAME")
    password = os.getenv("TRANSLATOR_PASSWORD")
    if not username or not password:
        raise SystemExit("يجب ضبط TRANSLATOR_USERNAME و TRANSLATOR_PASSWORD.")
    await provider.sign_in(username, password)


def _print_jobs(session: TranslatorSession) -> None:
    cards = session.registry.cards()
    if not cards:
        print("لا توجد ترجمات بعد. ارفع ملف PDF للبدء!")
        return
    for card in cards:
        print(f"{card['job_id']}  [{card['badge']}] {card['status']:<10} {card['filename']} → {card['language']}  {card['created_at']}")


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    configure_logging(settings.log_level)

    provider = CognitoTokenProvider(settings)
    try:
        await _sign_in(provider)
    except TranslatorError as exc:
        print(exc.message, file=sys.stderr)
        return 1

    async with TranslatorSession(settings, token_provider=provider) as session:
        print(f"مرحبًا، {session.login_id}")

        if args.command == "jobs":
            _print_jobs(session)
            return 0

        if args.command == "download":
            url = await session.download(args.job_id)
            if url is None:
                print(session.error, file=sys.stderr)
                return 1
            print(url)
            return 0

        uploads = session.uploads
        try:
            if args.language:
                uploads.set_target_language(args.language)
            uploads.select(SelectedFile.from_path(args.file))
        except TranslatorError as exc:
            print(exc.message, file=sys.stderr)
            return 2

        print(f"جاري رفع {describe_file(uploads.selected_file)} ...")
        job_id = await uploads.submit()
        if job_id is None:
            print(uploads.error, file=sys.stderr)
            return 1
        print(uploads.success)
        return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    raise SystemExit(asyncio.run(run(args)))


if __name__ == "__main__":  # pragma: no cover
    main()
