"""Type checker for the fully annotated L5 language."""

from .typechecker import TypeChecker, l5_program_typeof, l5_typeof, typeof_exp, typeof_program
