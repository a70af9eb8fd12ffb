#!/usr/bin/env python3
"""uitree CLI - Inspect and run tree descriptions.

Usage:
    uitree <file.uit> --lark                        # Show Lark parse tree
    uitree <file.uit> --ast                         # Show parsed tree
    uitree <file.uit> --ops                         # Show build operations
    uitree <file.uit> --python                      # Show generated Python
    uitree <file.uit> --run --namespace defs.py     # Build with a recording host
"""

import argparse
import logging
import pathlib
import runpy
import sys

from lark import Token, Tree

import uitree


def prettylark(node, indent=0, show_positions=False):
    """Print a lark parse tree, one rule or token per line."""
    prefix = "  " * indent
    match node:
        case Token():
            pos = f" @{node.line}:{node.column}" if show_positions else ""
            text = node.value if len(node.value) < 60 else node.value[:57] + "..."
            print(f"{prefix}{node.type}: {text!r}{pos}")
        case Tree(children=[Token() as token]):
            print(f"{prefix}{node.data}: {token.value!r}{_meta_pos(node, show_positions)}")
        case Tree():
            print(f"{prefix}{node.data}:{_meta_pos(node, show_positions)}")
            for child in node.children:
                prettylark(child, indent + 1, show_positions)


def _meta_pos(tree, show_positions):
    if not show_positions or tree.meta.empty:
        return ""
    return f" @{tree.meta.line}:{tree.meta.column}"


def prettyast(node, indent=0, show_pos=False):
    """Pretty-print a parsed tree."""
    ind = "  " * indent
    pos = ""
    if show_pos and getattr(node, "position", None) and node.position.start_line:
        pos = f"  [{node.position.start_line}:{node.position.start_column}]"

    match node:
        case uitree.Tree():
            print(f"{ind}{node.base or uitree.EMPTY_PRESET}{pos}")
            for override in node.overrides:
                print(f"{ind}  {{{override.field}: {override.value.text}}}")
            for marker in node.markers:
                kind = "bundle" if marker.bundle else "marker"
                print(f"{ind}  [{kind} {marker.value.text}]")
            for child in node.children:
                prettyast(child, indent + 1, show_pos)
        case uitree.Conditional():
            for number, arm in enumerate(node.arms):
                keyword = "if" if number == 0 else "else if"
                print(f"{ind}{keyword} ({arm.predicate.text}){pos}")
                for child in arm.children:
                    prettyast(child, indent + 1, show_pos)
            if node.orelse is not None:
                print(f"{ind}else")
                for child in node.orelse:
                    prettyast(child, indent + 1, show_pos)
        case uitree.Adopt():
            print(f"{ind}id({node.node.text}){pos}")


def show_python(source):
    """Print generated Python with syntax highlighting."""
    import rich.console, rich.syntax
    console = rich.console.Console()
    console.print(rich.syntax.Syntax(source, "python"))


def show_nodes(root):
    """Print the nodes built by a RecordingHost as a tree."""
    import rich.console, rich.text, rich.tree

    def add(branch, node):
        label = repr(node.template)
        extras = [repr(b) for b in node.bundles] + [repr(m) for m in node.markers]
        if extras:
            label += f" [{', '.join(extras)}]"
        sub = branch.add(rich.text.Text(label))
        for child in node.children:
            add(sub, child)

    tree = rich.tree.Tree("build")
    add(tree, root)
    rich.console.Console().print(tree)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="uitree",
        description="Inspect and run uitree descriptions")
    parser.add_argument("source",
        help="Description file to compile")
    parser.add_argument("--text", action="store_true",
        help="Treat source as the description text itself")
    parser.add_argument("--lark", action="store_true",
        help="Show Lark parse tree")
    parser.add_argument("--ast", action="store_true",
        help="Show the parsed tree")
    parser.add_argument("--ops", action="store_true",
        help="Show the build operations")
    parser.add_argument("--python", action="store_true",
        help="Show the generated Python source")
    parser.add_argument("--run", action="store_true",
        help="Build with a recording host and show the resulting nodes")
    parser.add_argument("--namespace", metavar="FILE",
        help="Python file whose globals supply templates and names for --run")
    parser.add_argument("--override-field", metavar="FIELD",
        help="Apply node overrides to this field of each template (eg. style)")
    parser.add_argument("--pos", action="store_true",
        help="Show line:column positions for nodes")
    parser.add_argument("--verbose", action="store_true",
        help="Log debug messages")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    modes = [args.lark, args.ast, args.ops, args.python, args.run]
    if not any(modes):
        parser.error("No output mode specified. Use --lark, --ast, --ops, --python or --run")
    if sum(modes) > 1:
        parser.error("Only one output mode can be used at a time")
    if args.namespace and not args.run:
        parser.error("--namespace is only used with --run")

    if args.text:
        source = args.source
        filename = None
    else:
        filepath = pathlib.Path(args.source)
        if not filepath.exists():
            print(f"Error: File not found: {filepath}", file=sys.stderr)
            sys.exit(1)
        source = filepath.read_text(encoding="utf-8")
        filename = str(filepath)

    try:
        if args.lark:
            prettylark(uitree.parse_lark(source, filename=filename),
                       show_positions=args.pos)
        elif args.ast:
            prettyast(uitree.parse(source, filename=filename), show_pos=args.pos)
        else:
            program = uitree.compile_ui(
                source, filename=filename, override_field=args.override_field)
            if args.ops:
                print(f"Operations ({len(program)}):")
                print(program.format())
            elif args.python:
                show_python(uitree.render_python(program))
            else:
                namespace = {}
                if args.namespace:
                    namespace = runpy.run_path(args.namespace)
                host = uitree.RecordingHost()
                root = program.run(host, namespace)
                show_nodes(root)
    except uitree.ParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        if e.context:
            print(e.context, file=sys.stderr)
        sys.exit(1)
    except uitree.BuildError as e:
        print(f"Build error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
