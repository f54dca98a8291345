"""Tests for the command-line interface."""

import os
import signal
import subprocess
import sys
import time

import pytest
from pypdf import PdfWriter

from ragmypdf import InvalidConfiguration, RAGConfig, cli
from ragmypdf.cli import chat, config_from_args, main, parse_args
from ragmypdf.rag import FakeEmbedding, RAGPipeline

from helpers import CannedProvider


def scripted_input(*lines: str):
    """Async input function replaying ``lines`` then signalling EOF."""
    remaining = list(lines)

    async def read(prompt: str) -> str:
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return read


@pytest.fixture
def blank_pdf(tmp_path):
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    path = tmp_path / "blank.pdf"
    with open(path, "wb") as f:
        writer.write(f)
    return path


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep a stray rag-my-pdf.yaml in the working directory out of the tests."""
    monkeypatch.chdir(tmp_path)


class TestArguments:
    """Tests for argument parsing and configuration merging."""

    def test_defaults(self):
        """Test documented defaults."""
        config = config_from_args(parse_args(["--pdf", "doc.pdf"]))

        assert config.model == "gpt-3.5-turbo"
        assert config.chunk_size == 500
        assert config.chunk_overlap == 50

    def test_flags_override(self):
        """Test that flags override defaults."""
        args = parse_args([
            "--pdf", "doc.pdf",
            "--model", "gpt-4o",
            "--chunk-size", "100",
            "--chunk-overlap", "10",
            "--top-k", "4",
            "--timeout", "5",
            "--verbose",
        ])
        config = config_from_args(args)

        assert args.verbose
        assert config.model == "gpt-4o"
        assert config.chunk_size == 100
        assert config.chunk_overlap == 10
        assert config.top_k == 4
        assert config.retry.timeout == 5.0

    def test_config_file_then_flags(self, tmp_path):
        """Test that flags win over the configuration file."""
        path = tmp_path / "custom.yaml"
        path.write_text("model: gpt-4o\nchunk_size: 300\n")

        config = config_from_args(parse_args(["--pdf", "d.pdf", "--config", str(path), "--chunk-size", "250"]))

        assert config.model == "gpt-4o"
        assert config.chunk_size == 250

    def test_pdf_required(self):
        """Test that --pdf is required."""
        with pytest.raises(SystemExit):
            parse_args([])


class TestMain:
    """Tests for main()."""

    def test_invalid_configuration_before_loading(self, tmp_path):
        """Test that bad chunking flags fail before the PDF is touched."""
        code = main(["--pdf", str(tmp_path / "missing.pdf"), "--chunk-size", "10", "--chunk-overlap", "10"])

        assert code == 2

    def test_missing_pdf(self, tmp_path):
        """Test a PDF path that does not exist."""
        assert main(["--pdf", str(tmp_path / "missing.pdf")]) == 1

    def test_empty_pdf_question(self, blank_pdf):
        """Test that a PDF without text reports an empty index."""
        assert main(["--pdf", str(blank_pdf), "--question", "Anything?"]) == 1

    def test_interactive_exit(self, blank_pdf, capsys):
        """Test the interactive session with an empty document."""
        code = main(["--pdf", str(blank_pdf)], input_fn=scripted_input("hello?", "exit"))

        assert code == 0
        out = capsys.readouterr().out
        assert "Welcome to RAG PDF Chatbot!" in out
        assert "Loaded 0 chunks from your document" in out


class TestChat:
    """Tests for the chat loop."""

    @pytest.mark.asyncio
    async def test_answers_until_exit(self, sample_document):
        """Test that questions are answered until 'exit'."""
        pipeline = RAGPipeline(FakeEmbedding(), CannedProvider("42"), RAGConfig(chunk_size=5, chunk_overlap=1))
        await pipeline.build(sample_document)
        printed = []

        answered = await chat(
            pipeline,
            scripted_input("", "What is the answer?", "  ", "QUIT", "never asked"),
            printed.append,
        )

        assert answered == 1
        assert "42" in printed

    @pytest.mark.asyncio
    async def test_eof_ends_session(self, sample_document):
        """Test that end of input ends the session."""
        pipeline = RAGPipeline(FakeEmbedding(), CannedProvider(), RAGConfig(chunk_size=5, chunk_overlap=1))
        await pipeline.build(sample_document)

        answered = await chat(pipeline, scripted_input("one?", "two?"), lambda line: None)

        assert answered == 2

    @pytest.mark.asyncio
    async def test_errors_do_not_end_session(self, provider):
        """Test that a failed question keeps the loop going."""
        pipeline = RAGPipeline(FakeEmbedding(), provider)

        answered = await chat(pipeline, scripted_input("no index yet?", "exit"), lambda line: None)

        assert answered == 0


class TestSessionEnd:
    """Tests for ending the session with Ctrl+C."""

    def test_keyboard_interrupt_at_prompt(self, blank_pdf):
        """Test that Ctrl+C while waiting for a question exits cleanly."""

        async def interrupted(prompt: str) -> str:
            raise KeyboardInterrupt

        assert main(["--pdf", str(blank_pdf)], input_fn=interrupted) == 0

    @pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX signals")
    def test_sigint_ends_waiting_process(self, blank_pdf, tmp_path):
        """Test that SIGINT ends a real session blocked on stdin."""
        proc = subprocess.Popen(
            [sys.executable, "-c", "import sys; from ragmypdf.cli import main; sys.exit(main(sys.argv[1:]))",
             "--pdf", str(blank_pdf)],
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            cwd=tmp_path,
            env={**os.environ, "PYTHONUNBUFFERED": "1"},
            text=True,
        )
        try:
            for line in proc.stdout:
                if "Type 'exit'" in line:
                    break
            time.sleep(0.5)
            proc.send_signal(signal.SIGINT)

            returncode = proc.wait(timeout=10)
        finally:
            if proc.poll() is None:
                proc.kill()
                proc.wait()
            proc.stdin.close()
            proc.stdout.close()

        assert returncode == 0


class TestConfigErrors:
    """Tests for configuration errors reported by main()."""

    def test_missing_config_file(self, blank_pdf, tmp_path):
        """Test that a --config path that does not exist is rejected."""
        args = parse_args(["--pdf", "d.pdf", "--config", str(tmp_path / "typo.yaml")])

        with pytest.raises(InvalidConfiguration):
            config_from_args(args)
        assert main(["--pdf", str(blank_pdf), "--config", str(tmp_path / "typo.yaml")]) == 2

    def test_malformed_config_file(self, blank_pdf, tmp_path):
        """Test that a YAML syntax error exits with the configuration code."""
        path = tmp_path / "broken.yaml"
        path.write_text("model: [unclosed\n")

        assert main(["--pdf", str(blank_pdf), "--config", str(path)]) == 2

    def test_non_mapping_config_file(self, blank_pdf, tmp_path):
        """Test that a YAML list exits with the configuration code."""
        path = tmp_path / "list.yaml"
        path.write_text("- gpt-4o\n")

        assert main(["--pdf", str(blank_pdf), "--config", str(path)]) == 2


class TestSingleQuestion:
    """Tests for --question mode."""

    def test_degraded_answer_is_flagged(self, monkeypatch, sample_document, capsys):
        """Test that an answer without document context carries the notice."""
        monkeypatch.setattr(
            cli,
            "create_pipeline",
            lambda config: RAGPipeline(FakeEmbedding(), CannedProvider("general answer"), config),
        )
        monkeypatch.setattr(cli, "load_pdf_content", lambda path: sample_document)

        code = main([
            "--pdf", "sample.pdf",
            "--question", "What is this?",
            "--chunk-size", "5",
            "--chunk-overlap", "1",
            "--max-context-words", "1",
        ])

        assert code == 0
        out = capsys.readouterr().out
        assert "(No document context fit the budget; answering without it.)" in out
        assert "general answer" in out

    def test_answer_with_context(self, monkeypatch, sample_document, capsys):
        """Test that a normal answer is printed without the notice."""
        monkeypatch.setattr(
            cli,
            "create_pipeline",
            lambda config: RAGPipeline(FakeEmbedding(), CannedProvider("It is 42."), config),
        )
        monkeypatch.setattr(cli, "load_pdf_content", lambda path: sample_document)

        code = main(["--pdf", "sample.pdf", "--question", "What is the answer?", "--chunk-size", "5", "--chunk-overlap", "1"])

        assert code == 0
        out = capsys.readouterr().out
        assert "It is 42." in out
        assert "No document context" not in out
