import setuptools

with open("README.md", "r", encoding = "utf-8") as fh:
	long_description = fh.read()

setuptools.setup(
	name = "pymunch",
	version = "v0.1.0",
	author = "Mans Hulden",
	author_email = "mans.hulden@colorado.edu",
	description = "Generic DFA engine and maximal-munch tokenizer",
	long_description = long_description,
	long_description_content_type = "text/markdown",
	classifiers = [
		"Programming Language :: Python :: 3",
		"License :: OSI Approved :: Apache Software License",
		"Operating System :: OS Independent",
	],
	package_dir = {"": "src"},
	packages = setuptools.find_packages(where="src"),
	python_requires = ">=3.7",
	install_requires = [
		"graphviz", "typing_extensions"
	],
	extras_require = {
		"test": ["pytest"],
	}
)
