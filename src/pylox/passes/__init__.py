"""
Analysis passes run between parsing and execution.
"""

from .base import BasePass, PassContext, PassManager, ResolutionTable
from .resolver import Resolver, ResolverPass, resolve
