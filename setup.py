# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="portfoliotree",
    version="1.0.0",
    description="Column layout and connector routing for portfolio hierarchy diagrams",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["portfoliotree*"]),
    python_requires=">=3.9",
    install_requires=[
        "customtkinter",  # GUI host (portfoliotree-gui)
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'portfoliotree=portfoliotree.interface.cli.app:main',
        ],
        'gui_scripts': [
            'portfoliotree-gui=portfoliotree.interface.gui.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
