[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "htsbonsai"
version = "0.1.0"
description = "HMM-based speech synthesis building blocks: .htsvoice loading, voice interpolation and MLSA/MGLSA vocoding"
requires-python = ">=3.10"
dependencies = []
keywords = ["speech synthesis", "tts", "hts", "htsvoice", "vocoder", "mlsa", "mglsa"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio :: Speech",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["htsbonsai"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
