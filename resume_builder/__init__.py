"""Resume Builder - job-tailored resume generation."""

__version__ = "0.1.0"
