import io

from setuptools import find_packages, setup

with io.open('lc3vm/_version.py', encoding="utf-8") as fid:
    for line in fid:
        if line.startswith('__version__'):
            __version__ = line.strip().split()[-1][1:-1]
            break

with io.open('README.md', encoding="utf-8") as f:
    readme = f.read()

setup(name='lc3vm',
      version=__version__,
      description='An LC-3 virtual machine, with a Jupyter kernel based on MetaKernel',
      long_description=readme,
      long_description_content_type='text/markdown',
      python_requires='>=3.6',
      install_requires=["metakernel", "jupyter_client"],
      extras_require={'test': ["pytest"]},
      packages=find_packages(include=["lc3vm", "lc3vm.*"]),
      entry_points={
          'console_scripts': [
              'lc3vm = lc3vm.cli:main',
              'lc3vm-install-kernel = lc3vm.install:main',
          ],
      },
      classifiers = [
          'Framework :: IPython',
          'License :: OSI Approved :: BSD License',
          'Programming Language :: Python :: 3',
          'Topic :: System :: Emulators',
      ]
)
