from setuptools import setup, find_packages

setup(
    name="jsonrpc-invoker",
    version="0.1.0",
    description="JSON-RPC 2.0 client stubs generated from Python interface classes",
    author="jsonrpc-invoker contributors",
    packages=find_packages(include=["jsonrpc_invoker", "jsonrpc_invoker.*"]),
    install_requires=[
        "protobuf>=4.21.0",
        "pydantic>=2.0.0",
        "pyzmq>=24.0.0",
        "requests>=2.28.0",
        "opentelemetry-api>=1.14.0",
        "opentelemetry-sdk>=1.14.0",
        "opentelemetry-exporter-otlp>=1.14.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov",
            "black",
            "isort",
            "pylint",
        ],
    },
    python_requires=">=3.9",
)
