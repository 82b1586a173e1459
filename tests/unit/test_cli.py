from __future__ import annotations

import json

import pytest
import yaml

POSTING = """
Requirements:
- 5+ years of experience with Rust or Python
- Experience building distributed data pipelines
"""


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for var in [
        "EMBEDDING_STORE_PATH",
        "OUTPUT_FORMAT",
        "CORPUS_PATH",
        "OUTPUT_DIR",
        "RESUME_TEMPLATE_PATH",
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def stub_provider(monkeypatch, counting_provider):
    monkeypatch.setattr(
        "resume_builder.__main__._build_provider", lambda settings: counting_provider
    )
    return counting_provider


@pytest.fixture
def corpus_file(tmp_path, sample_records):
    path = tmp_path / "resume.yaml"
    path.write_text(yaml.safe_dump({"records": sample_records}), encoding="utf-8")
    return path


@pytest.fixture
def posting_file(tmp_path):
    path = tmp_path / "job.txt"
    path.write_text(POSTING, encoding="utf-8")
    return path


def test_cli_parser_supports_modes() -> None:
    from resume_builder.__main__ import create_parser

    parser = create_parser()

    tailor_args = parser.parse_args(
        ["tailor", "--posting", "job.txt", "--company", "Acme", "--format", "json"]
    )
    assert tailor_args.mode == "tailor"
    assert tailor_args.posting == ["job.txt"]
    assert tailor_args.company == ["Acme"]
    assert tailor_args.format == "json"

    assert parser.parse_args(["extract", "--posting", "-"]).mode == "extract"
    assert parser.parse_args(["check-corpus"]).mode == "check-corpus"


def test_cli_without_mode_prints_help(capsys) -> None:
    from resume_builder.__main__ import main

    assert main([]) == 0
    assert "resume-builder" in capsys.readouterr().out


def test_cli_check_corpus_reports_counts(stub_provider, corpus_file, capsys) -> None:
    from resume_builder.__main__ import main

    exit_code = main(["check-corpus", "--corpus", str(corpus_file)])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Units: 7" in out
    assert "- skills: 3" in out
    assert stub_provider.calls == []


def test_cli_check_corpus_flags_malformed_records(
    stub_provider, tmp_path, sample_records, capsys
) -> None:
    from resume_builder.__main__ import main

    path = tmp_path / "broken.json"
    path.write_text(
        json.dumps(sample_records + [{"category": "skills"}]), encoding="utf-8"
    )

    exit_code = main(["check-corpus", "--corpus", str(path)])

    assert exit_code == 1
    assert "Warning: corpus record 8" in capsys.readouterr().err


def test_cli_check_corpus_missing_file(stub_provider, tmp_path, capsys) -> None:
    from resume_builder.__main__ import main

    exit_code = main(["check-corpus", "--corpus", str(tmp_path / "nope.yaml")])

    assert exit_code == 1
    assert "corpus failed: Corpus not found" in capsys.readouterr().err


def test_cli_extract_prints_requirements(stub_provider, posting_file, capsys) -> None:
    from resume_builder.__main__ import main

    exit_code = main(["extract", "--posting", str(posting_file)])

    assert exit_code == 0
    requirements = json.loads(capsys.readouterr().out)
    assert [r["text"] for r in requirements] == [
        "5+ years of experience with Rust or Python",
        "Experience building distributed data pipelines",
    ]
    assert len(stub_provider.calls) == 2


def test_cli_extract_empty_posting_fails(stub_provider, tmp_path, capsys) -> None:
    from resume_builder.__main__ import main

    path = tmp_path / "empty.txt"
    path.write_text("\n\n", encoding="utf-8")

    exit_code = main(["extract", "--posting", str(path)])

    assert exit_code == 1
    assert "extract failed" in capsys.readouterr().err


def test_cli_missing_posting_errors_cleanly(tmp_path, capsys) -> None:
    from resume_builder.__main__ import main

    exit_code = main(["extract", "--posting", str(tmp_path / "missing.txt")])

    assert exit_code == 1
    assert "Error reading posting" in capsys.readouterr().err


def test_cli_tailor_writes_document_and_report(
    stub_provider, corpus_file, posting_file, tmp_path, capsys
) -> None:
    from resume_builder.__main__ import main

    report = tmp_path / "reports" / "run.json"

    exit_code = main(
        [
            "tailor",
            "--posting",
            str(posting_file),
            "--corpus",
            str(corpus_file),
            "--job-title",
            "Backend Engineer",
            "--company",
            "Acme",
            "--output-dir",
            str(tmp_path / "out"),
            "--format",
            "json",
            "--report",
            str(report),
        ]
    )

    assert exit_code == 0
    output = tmp_path / "out" / "Acme Backend Engineer" / "resume.json"
    assert output.exists()
    assert f"Wrote: {output}" in capsys.readouterr().out

    [payload] = json.loads(report.read_text(encoding="utf-8"))
    assert payload["posting"] == str(posting_file)
    assert payload["success"] is True
    assert payload["stage"] is None
    assert len(payload["requirements"]) == 2
    assert set(payload["match_result"]["aggregate"]) == {
        record["id"] for record in yaml.safe_load(corpus_file.read_text())["records"]
    }
    assert payload["document"]["company"] == "Acme"


def test_cli_tailor_reports_failed_stage(
    stub_provider, corpus_file, tmp_path, capsys
) -> None:
    from resume_builder.__main__ import main

    posting = tmp_path / "blank.txt"
    posting.write_text("   ", encoding="utf-8")

    exit_code = main(
        ["tailor", "--posting", str(posting), "--corpus", str(corpus_file)]
    )

    assert exit_code == 1
    assert "extract failed: Job posting text is empty" in capsys.readouterr().err


def test_cli_tailor_several_postings_share_corpus_embeddings(
    stub_provider, corpus_file, posting_file, tmp_path, capsys, sample_records
) -> None:
    """Each corpus unit is embedded once however many postings are tailored."""
    from resume_builder.__main__ import main

    second = tmp_path / "platform.txt"
    second.write_text(
        "Requirements:\n- Kubernetes operations\n- Terraform modules\n",
        encoding="utf-8",
    )
    report = tmp_path / "run.json"

    exit_code = main(
        [
            "tailor",
            "--posting",
            str(posting_file),
            "--posting",
            str(second),
            "--corpus",
            str(corpus_file),
            "--company",
            "Acme",
            "--output-dir",
            str(tmp_path / "out"),
            "--report",
            str(report),
        ]
    )

    assert exit_code == 0
    assert (tmp_path / "out" / "Acme job" / "resume.md").exists()
    assert (tmp_path / "out" / "Acme platform" / "resume.md").exists()
    for record in sample_records:
        assert stub_provider.calls.count(record["text"]) == 1

    out = capsys.readouterr().out
    assert f"{posting_file}: Wrote:" in out
    assert f"{second}: Wrote:" in out

    payload = json.loads(report.read_text(encoding="utf-8"))
    assert [entry["posting"] for entry in payload] == [str(posting_file), str(second)]
    assert [entry["document"]["job_title"] for entry in payload] == ["job", "platform"]


def test_cli_tailor_reports_each_failed_posting(
    stub_provider, corpus_file, posting_file, tmp_path, capsys
) -> None:
    """A failing posting does not stop the others from being written."""
    from resume_builder.__main__ import main

    blank = tmp_path / "blank.txt"
    blank.write_text("   ", encoding="utf-8")

    exit_code = main(
        [
            "tailor",
            "--posting",
            str(blank),
            "--posting",
            str(posting_file),
            "--corpus",
            str(corpus_file),
            "--output-dir",
            str(tmp_path / "out"),
        ]
    )

    captured = capsys.readouterr()
    assert exit_code == 1
    assert f"{blank}: extract failed: Job posting text is empty" in captured.err
    assert f"{posting_file}: Wrote:" in captured.out
    assert (tmp_path / "out" / "job" / "resume.md").exists()


def test_cli_tailor_job_titles_must_match_postings(
    stub_provider, corpus_file, posting_file, tmp_path, capsys
) -> None:
    from resume_builder.__main__ import main

    exit_code = main(
        [
            "tailor",
            "--posting",
            str(posting_file),
            "--posting",
            str(posting_file),
            "--posting",
            str(posting_file),
            "--job-title",
            "A",
            "--job-title",
            "B",
            "--corpus",
            str(corpus_file),
        ]
    )

    assert exit_code == 1
    assert "--job-title given 2 times for 3 postings" in capsys.readouterr().err
    assert stub_provider.calls == []


def test_cli_tailor_rejects_postings_sharing_a_folder(
    stub_provider, corpus_file, posting_file, capsys
) -> None:
    from resume_builder.__main__ import main

    exit_code = main(
        [
            "tailor",
            "--posting",
            str(posting_file),
            "--posting",
            str(posting_file),
            "--job-title",
            "Backend Engineer",
            "--corpus",
            str(corpus_file),
        ]
    )

    assert exit_code == 1
    assert "share a company and job title" in capsys.readouterr().err


def test_cli_tailor_reads_stdin_once(stub_provider, corpus_file, capsys) -> None:
    from resume_builder.__main__ import main

    exit_code = main(
        ["tailor", "--posting", "-", "--posting", "-", "--corpus", str(corpus_file)]
    )

    assert exit_code == 1
    assert "stdin ('-') can only be read once" in capsys.readouterr().err


def test_cli_tailor_uses_custom_template(
    stub_provider, corpus_file, posting_file, tmp_path
) -> None:
    from resume_builder.__main__ import main

    template = tmp_path / "templates" / "short.md.j2"
    template.parent.mkdir()
    template.write_text(
        "{{ target }}: {{ document.unit_ids | length }} units", encoding="utf-8"
    )

    exit_code = main(
        [
            "tailor",
            "--posting",
            str(posting_file),
            "--corpus",
            str(corpus_file),
            "--job-title",
            "Backend Engineer",
            "--company",
            "Acme",
            "--output-dir",
            str(tmp_path / "out"),
            "--template",
            str(template),
        ]
    )

    assert exit_code == 0
    output = tmp_path / "out" / "Acme Backend Engineer" / "resume.md"
    text = output.read_text(encoding="utf-8")
    assert text.startswith("Backend Engineer at Acme: ")
    assert text.endswith(" units\n")


def test_cli_tailor_template_from_settings(
    stub_provider, corpus_file, posting_file, tmp_path, monkeypatch
) -> None:
    from resume_builder.__main__ import main

    template = tmp_path / "plain.md.j2"
    template.write_text("custom {{ target }}", encoding="utf-8")
    monkeypatch.setenv("RESUME_TEMPLATE_PATH", str(template))

    exit_code = main(
        [
            "tailor",
            "--posting",
            str(posting_file),
            "--corpus",
            str(corpus_file),
            "--job-title",
            "Backend Engineer",
            "--output-dir",
            str(tmp_path / "out"),
        ]
    )

    assert exit_code == 0
    output = tmp_path / "out" / "Backend Engineer" / "resume.md"
    assert output.read_text(encoding="utf-8") == "custom Backend Engineer\n"


def test_cli_tailor_missing_template_fails_clearly(
    stub_provider, corpus_file, posting_file, tmp_path, capsys
) -> None:
    from resume_builder.__main__ import main

    missing = tmp_path / "nope.md.j2"

    exit_code = main(
        [
            "tailor",
            "--posting",
            str(posting_file),
            "--corpus",
            str(corpus_file),
            "--template",
            str(missing),
        ]
    )

    assert exit_code == 1
    assert f"Error: resume template not found: {missing}" in capsys.readouterr().err
    assert stub_provider.calls == []
    assert not (tmp_path / "resumes").exists()
