"""Setup configuration for prompt-relay"""
from setuptools import setup, find_packages

setup(
    name="prompt-relay",
    version="0.1.0",
    description="Relay a single prompt to an OpenAI- or Anthropic-style chat-completion API",
    packages=find_packages(include=["prompt_relay", "prompt_relay.*"]),
    install_requires=[
        "click>=8.1.7",
        "python-dotenv>=1.0.0",
        "httpx>=0.27.0",
        "pydantic>=2.5.0",
        "PyYAML>=6.0.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "prompt-relay=prompt_relay.cli:cli",
        ],
    },
    python_requires=">=3.9",
)
