from setuptools import setup, find_packages

setup(
    name="edacap_mcp_tools",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "google-adk",
        "mcp>=1.0,<2",
        "aiohttp>=3.8.0",
        "python-dotenv",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "edacap-mcp-server=edacap_mcp_tools.climate_advisory_tool.climate_server:main",
        ],
    },
    python_requires=">=3.10",
)
