from setuptools import setup, find_packages
import re

# Read version from cashforecast/__init__.py
with open('cashforecast/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='cash-forecast',
    version=version,
    packages=find_packages(include=['cashforecast', 'cashforecast.*']),
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'python-dateutil>=2.8',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'cash-forecast=cashforecast.cli.__main__:main',
            'cash-forecast-mcp=cashforecast.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Paycheck-to-paycheck cash flow forecasting tools.',
    python_requires='>=3.10',
)
