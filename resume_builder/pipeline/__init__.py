"""End-to-end tailoring pipeline.

Main Entry Point:
    TailoringService - Extract, match, assemble and render in one call

Example:
    from resume_builder.pipeline import TailoringService

    service = TailoringService(provider)
    result = await service.tailor(posting_text, corpus, job_title="Engineer")

    if result.success:
        print(f"Resume: {result.output_path}")
"""

from resume_builder.pipeline.service import TailoringResult, TailoringService

__all__ = ["TailoringService", "TailoringResult"]
