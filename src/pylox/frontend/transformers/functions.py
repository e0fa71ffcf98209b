"""
Function Definition Parser - Extracted from LoxTransformer
Handles parsing of function/method declarations, parameters and classes
"""

from typing import Any, Callable, List, Optional, Tuple, Union
from typing_extensions import TypeAlias
from lark.lexer import Token
from ...shared import (
    ClassDeclaration, FunctionDeclaration, ParseError, SourceLocation, Statement, Variable,
)
from ...utils.config import MAX_PARAMETERS

# Type aliases for better clarity
LarkMeta: TypeAlias = Any  # Lark's internal Meta object
LocationExtractor: TypeAlias = Callable[[LarkMeta], SourceLocation]
Parameter: TypeAlias = Tuple[str, SourceLocation]
FunctionPart: TypeAlias = Union[List[Parameter], List[Statement]]


class FunctionDefinitionParser:
    """Dedicated parser for function and class declarations"""

    def __init__(self, location_extractor: LocationExtractor) -> None:
        self.extract_location = location_extractor

    def parse_function_definition(self, meta: LarkMeta, name: Token, *args: FunctionPart) -> FunctionDeclaration:
        """Grammar: NAME '(' parameters? ')' body"""
        location = self.extract_location(meta)
        params, body = self._parse_function_args(args)
        return FunctionDeclaration(
            name=str(name),
            params=[param for param, _ in params],
            body=body,
            location=location,
            param_locations=[param_location for _, param_location in params],
        )

    def parse_class_definition(self, meta: LarkMeta, name: Token,
                               *args: Union[Variable, FunctionDeclaration]) -> ClassDeclaration:
        """Grammar: 'class' NAME superclass? '{' function* '}'"""
        location = self.extract_location(meta)
        superclass: Optional[Variable] = None
        methods: List[FunctionDeclaration] = []
        for item in args:
            if isinstance(item, Variable):
                superclass = item
            else:
                methods.append(item)
        return ClassDeclaration(
            name=str(name),
            superclass=superclass,
            methods=methods,
            location=location,
        )

    def _parse_function_args(self, args: Tuple[FunctionPart, ...]) -> Tuple[List[Parameter], List[Statement]]:
        """args is (body,) or (parameters, body)"""
        if len(args) == 2:
            params, body = args
        elif len(args) == 1:
            params, body = [], args[0]
        else:
            raise ValueError(f"Unexpected function args: {len(args)}")
        return list(params), list(body)


class ParameterParser:
    """Dedicated parser for function parameter lists"""

    def __init__(self, location_extractor: LocationExtractor) -> None:
        self.extract_location = location_extractor

    def parse_parameters(self, meta: LarkMeta, *names: Token) -> List[Parameter]:
        """Each name paired with where it is written."""
        if len(names) > MAX_PARAMETERS:
            overflow = names[MAX_PARAMETERS]
            raise ParseError(f"Can't have more than {MAX_PARAMETERS} parameters.",
                             self._name_location(meta, overflow), lexeme=str(overflow))
        return [(str(name), self._name_location(meta, name)) for name in names]

    def _name_location(self, meta: LarkMeta, name: Token) -> SourceLocation:
        return SourceLocation(
            file=self.extract_location(meta).file,
            line=name.line,
            column=name.column,
            start=name.start_pos or 0,
            end=name.end_pos or 0,
            end_line=name.end_line or 0,
            end_column=name.end_column or 0,
        )
