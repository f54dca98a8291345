"""Command-line entrypoint: chat with a PDF."""

import argparse
import asyncio
import logging
import threading
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence

import openai

from ragmypdf.exceptions import InvalidConfiguration, RagError
from ragmypdf.pdf import load_pdf_content
from ragmypdf.providers.openai import OpenAIProvider
from ragmypdf.rag.embeddings import OpenAIEmbedding
from ragmypdf.rag.pipeline import Answer, RAGPipeline
from ragmypdf.rag.retry import RetryingEmbedding, RetryingProvider
from ragmypdf.utils.config import RAGConfig, load_config
from ragmypdf.utils.logging import setup_logging

logger = logging.getLogger("ragmypdf.cli")

EXIT_COMMANDS = ("exit", "quit")

InputFn = Callable[[str], Awaitable[str]]
OutputFn = Callable[[str], None]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rag-my-pdf",
        description="PDF RAG chatbot using OpenAI",
    )
    parser.add_argument("-p", "--pdf", type=Path, required=True, help="Path to the PDF file to load")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("-m", "--model", default=None, help="OpenAI model to use (default: gpt-3.5-turbo)")
    parser.add_argument("--chunk-size", type=int, default=None, help="Chunk size in words (default: 500)")
    parser.add_argument("--chunk-overlap", type=int, default=None, help="Overlap between chunks in words (default: 50)")
    parser.add_argument("--top-k", type=int, default=None, help="Chunks retrieved per question (default: 2)")
    parser.add_argument("--embedding-model", default=None, help="OpenAI embedding model (default: text-embedding-ada-002)")
    parser.add_argument("--max-context-words", type=int, default=None, help="Word budget for retrieved context (default: 3000)")
    parser.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds (default: 60)")
    parser.add_argument("--config", type=Path, default=None, help="Optional YAML or JSON configuration file")
    parser.add_argument("-q", "--question", default=None, help="Answer one question and exit")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def config_from_args(args: argparse.Namespace) -> RAGConfig:
    """Merge the configuration file with command-line flags and validate."""
    config = load_config(args.config, required=True) if args.config else load_config()
    config = config.merged({
        "model": args.model,
        "embedding_model": args.embedding_model,
        "chunk_size": args.chunk_size,
        "chunk_overlap": args.chunk_overlap,
        "top_k": args.top_k,
        "max_context_words": args.max_context_words,
    })
    if args.timeout is not None:
        config = config.model_copy(
            update={"retry": config.retry.model_copy(update={"timeout": args.timeout})}
        )
    return config.validate_pipeline()


def create_pipeline(config: RAGConfig) -> RAGPipeline:
    """Wire the OpenAI collaborators, with retries, into a pipeline."""
    embedding = RetryingEmbedding(
        OpenAIEmbedding(
            model=config.embedding_model,
            api_key=config.api_key,
            base_url=config.base_url,
            batch_size=config.embedding_batch_size,
            max_concurrency=config.embedding_concurrency,
        ),
        config.retry,
    )
    provider = RetryingProvider(
        OpenAIProvider(api_key=config.api_key, base_url=config.base_url),
        config.retry,
    )
    return RAGPipeline(embedding=embedding, provider=provider, config=config)


async def _read_line(prompt: str) -> str:
    """Read one line from stdin without blocking the event loop.

    The blocking ``input()`` runs on a daemon thread that the loop never
    joins, so Ctrl+C ends the session while the prompt is waiting.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[str] = loop.create_future()

    def settle(line: Optional[str], error: Optional[BaseException]) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(line)

    def reader() -> None:
        try:
            line, error = input(prompt), None
        except (EOFError, OSError, ValueError) as exc:
            line, error = None, exc
        try:
            loop.call_soon_threadsafe(settle, line, error)
        except RuntimeError:
            # Loop already closed: the session ended while waiting for input
            pass

    threading.Thread(target=reader, name="rag-my-pdf-input", daemon=True).start()
    return await future


def print_answer(answer: Answer, output: OutputFn = print) -> None:
    if answer.degraded:
        output("(No document context fit the budget; answering without it.)")
    output(answer.text)


def print_welcome(pipeline: RAGPipeline, pdf_path: Path, output: OutputFn = print) -> None:
    output("           Welcome to RAG PDF Chatbot!")
    output("")
    output(f"Loaded {len(pipeline.chunks)} chunks from your document")
    output(f"Using model: {pipeline.config.model}")
    output(f"Ask me anything about the document {pdf_path}")
    output("Type 'exit' or press Ctrl+C to quit\n")


async def chat(
    pipeline: RAGPipeline,
    input_fn: InputFn = _read_line,
    output: OutputFn = print,
) -> int:
    """Run the interactive question loop until the user quits.

    Returns:
        Number of questions answered
    """
    answered = 0

    while True:
        try:
            question = (await input_fn("> ")).strip()
        except EOFError:
            break

        if not question:
            continue
        if question.lower() in EXIT_COMMANDS:
            break

        try:
            answer = await pipeline.ask(question)
        except (RagError, openai.OpenAIError) as exc:
            # A failed question leaves the index intact; keep the session going
            logger.error(str(exc))
            continue

        print_answer(answer, output)
        output("")
        answered += 1

    return answered


async def run(args: argparse.Namespace, config: RAGConfig, input_fn: InputFn = _read_line) -> int:
    logger.info("Starting RAG PDF Chatbot")
    logger.debug(f"Using model: {config.model}")

    pipeline = create_pipeline(config)

    logger.info(f"Loading PDF from: {args.pdf}")
    document = load_pdf_content(args.pdf)

    logger.info(f"Chunking text (size: {config.chunk_size}, overlap: {config.chunk_overlap})")
    await pipeline.build(document)

    if args.question:
        print_answer(await pipeline.ask(args.question))
        return 0

    print_welcome(pipeline, args.pdf)
    await chat(pipeline, input_fn)

    logger.info("Chatbot session ended")
    return 0


def main(argv: Optional[Sequence[str]] = None, input_fn: InputFn = _read_line) -> int:
    """Entry point for `rag-my-pdf`."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = config_from_args(args)
    except InvalidConfiguration as exc:
        logger.error(exc.message)
        return 2
    except ValueError as exc:
        logger.error(f"Invalid configuration: {exc}")
        return 2

    try:
        return asyncio.run(run(args, config, input_fn))
    except KeyboardInterrupt:
        logger.info("Chatbot session ended")
        return 0
    except RagError as exc:
        logger.error(exc.message)
        return 1
    except openai.OpenAIError as exc:
        logger.error(f"OpenAI request failed: {exc}")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
