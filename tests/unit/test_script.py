"""Unit tests for the script scanner (JS/TS and component options objects)."""

from codestruct.core.models import ElementKind
from codestruct.languages.script import EXPORT_DEFAULT_NAME, ScriptScanner, TypedScriptScanner

OPTIONS_COMPONENT = """\
import Foo from './Foo.vue'

export default {
  name: 'TodoList',
  components: { Foo },
  props: ['items', 'title'],
  data() {
    return {
      newTodo: '',
      count: 0
    }
  },
  computed: {
    remaining() {
      return this.items.length
    },
    done: function () {
      return 0
    }
  },
  watch: {
    'newTodo'(value) {
    },
    count: function (n) {}
  },
  methods: {
    // Adds a todo
    addTodo(text) {
      this.items.push(text)
    },
    remove: function (i) {}
  },
  mounted() {
    this.load()
  }
}"""


def lines_of(code: str) -> list[str]:
    return code.splitlines()


def names(elements) -> list[str]:
    return [e.name for e in elements if not e.is_pseudo]


class TestOptionsObject:
    """Tests for the default-export options mode."""

    def test_single_line_export(self) -> None:
        """export default { methods: { foo() {} } } nests export -> methods -> foo."""
        elements = ScriptScanner().scan(["export default { methods: { foo() {} } }"])

        (export,) = elements
        assert (export.name, export.kind, export.line) == (EXPORT_DEFAULT_NAME, ElementKind.CLASS, 1)
        (methods,) = export.children
        assert methods.name == "methods"
        (foo,) = methods.children
        assert (foo.name, foo.kind, foo.line) == ("foo", ElementKind.METHOD, 1)

    def test_recognized_keys_in_order(self) -> None:
        (export,) = ScriptScanner().scan(lines_of(OPTIONS_COMPONENT))

        assert export.line == 3
        assert names(export.children) == [
            "name",
            "components",
            "props",
            "data",
            "computed",
            "watch",
            "methods",
            "mounted",
        ]
        mounted = export.children[-1]
        assert mounted.kind == ElementKind.METHOD
        assert mounted.children == []

    def test_bag_entries(self) -> None:
        (export,) = ScriptScanner().scan(lines_of(OPTIONS_COMPONENT))
        options = {o.name: o for o in export.children}

        assert names(options["components"].children) == ["Foo"]
        assert names(options["props"].children) == ["items", "title"]
        assert names(options["data"].children) == ["newTodo", "count"]
        assert names(options["computed"].children) == ["remaining", "done"]
        assert names(options["watch"].children) == ["newTodo", "count"]
        assert names(options["methods"].children) == ["addTodo", "remove"]

    def test_multiline_props_array(self) -> None:
        code = """\
export default {
  props: [
    'title',
    'value'
  ],
  methods: {
    save() {}
  }
}"""
        (export,) = ScriptScanner().scan(lines_of(code))

        props, methods = export.children
        assert [(p.name, p.line) for p in props.children] == [("title", 3), ("value", 4)]
        assert names(methods.children) == ["save"]

    def test_entry_kinds(self) -> None:
        (export,) = ScriptScanner().scan(lines_of(OPTIONS_COMPONENT))
        options = {o.name: o for o in export.children}

        assert {e.kind for e in options["components"].children} == {ElementKind.VARIABLE}
        assert {e.kind for e in options["props"].children} == {ElementKind.PROPERTY}
        assert {e.kind for e in options["data"].children} == {ElementKind.VARIABLE}
        assert {e.kind for e in options["computed"].children} == {ElementKind.PROPERTY}
        assert {e.kind for e in options["watch"].children} == {ElementKind.METHOD}
        assert options["methods"].kind == ElementKind.PROPERTY

    def test_method_details(self) -> None:
        (export,) = ScriptScanner().scan(lines_of(OPTIONS_COMPONENT))
        methods = next(o for o in export.children if o.name == "methods")

        add_todo, remove = methods.children
        assert add_todo.line == 28
        assert add_todo.parameters == "text"
        assert add_todo.comment == "Adds a todo"
        assert [c.name for c in add_todo.children] == ["Description:"]
        assert remove.parameters == "i"
        assert remove.line == 31

    def test_watch_parameters(self) -> None:
        (export,) = ScriptScanner().scan(lines_of(OPTIONS_COMPONENT))
        watch = next(o for o in export.children if o.name == "watch")

        assert [w.parameters for w in watch.children] == ["value", "n"]

    def test_define_component_and_setup(self) -> None:
        code = """\
export default defineComponent({
  setup(props) {
    return {}
  },
})"""
        (export,) = ScriptScanner().scan(lines_of(code))

        assert [(c.name, c.kind) for c in export.children] == [("setup", ElementKind.METHOD)]

    def test_arrow_data_and_props_object(self) -> None:
        code = """\
export default {
  props: {
    title: String,
    size: { type: Number, default: 1 },
  },
  data: () => ({
    a: 1,
    b: 2,
  }),
}"""
        (export,) = ScriptScanner().scan(lines_of(code))
        props, data = export.children

        assert names(props.children) == ["title", "size"]
        assert names(data.children) == ["a", "b"]

    def test_nested_keys_are_not_options(self) -> None:
        """Only direct keys of the exported object are recognized."""
        code = """\
export default {
  mounted() {
    const cfg = {
      methods: {},
    }
  },
}"""
        (export,) = ScriptScanner().scan(lines_of(code))

        assert names(export.children) == ["mounted"]

    def test_truncated_object(self) -> None:
        lines = ["export default {", "  methods: {", "    foo() {", "      go()"]

        (export,) = ScriptScanner().scan(lines)

        (methods,) = export.children
        assert names(methods.children) == ["foo"]

    def test_offset_applies_to_every_level(self) -> None:
        (export,) = ScriptScanner().scan(["export default { methods: { foo() {} } }"], offset=5)

        assert export.line == 6
        assert export.children[0].line == 6
        assert export.children[0].children[0].line == 6

    def test_code_after_export_is_scanned(self) -> None:
        lines = ["export default {", "  name: 'x',", "}", "function helper() {}"]

        export, helper = ScriptScanner().scan(lines)

        assert export.name == EXPORT_DEFAULT_NAME
        assert (helper.name, helper.kind, helper.line) == ("helper", ElementKind.FUNCTION, 4)


class TestDeclarations:
    """Tests for the ordinary declaration mode."""

    def test_function_forms_and_classes(self) -> None:
        code = """\
// Greets someone
function greet(name) {
  return 'hi ' + name
}

const add = (a, b) => a + b
export async function load(url) {
}
class Store {
  save() {}
}
handler = async (e) => {}"""
        elements = ScriptScanner().scan(lines_of(code))

        assert [(e.name, e.kind) for e in elements] == [
            ("greet", ElementKind.FUNCTION),
            ("add", ElementKind.FUNCTION),
            ("load", ElementKind.FUNCTION),
            ("Store", ElementKind.CLASS),
            ("handler", ElementKind.FUNCTION),
        ]
        greet, add, load, store, handler = elements
        assert greet.comment == "Greets someone"
        assert greet.parameters == "name"
        assert add.parameters == "a, b"
        assert load.line == 7
        assert store.children == []
        assert handler.parameters == "e"

    def test_default_export_class_is_not_options(self) -> None:
        (app,) = ScriptScanner().scan(["export default class App {", "}"])

        assert (app.name, app.kind) == ("App", ElementKind.CLASS)

    def test_typed_declarations(self) -> None:
        code = """\
export interface User {
  id: number
}
export enum Role { Admin, Guest }
export function find(id: number): Promise<User> {
}"""
        elements = TypedScriptScanner().scan(lines_of(code))

        assert [(e.name, e.kind) for e in elements] == [
            ("User", ElementKind.INTERFACE),
            ("Role", ElementKind.ENUM),
            ("find", ElementKind.FUNCTION),
        ]
        find = elements[2]
        assert find.parameters == "id: number"
        assert find.return_type == "Promise<User>"

    def test_untyped_ignores_interfaces(self) -> None:
        code = """\
export interface User {
}
export function find(id) {
}"""
        elements = ScriptScanner().scan(lines_of(code))

        assert [e.name for e in elements] == ["find"]
        assert elements[0].return_type is None

    def test_idempotent(self) -> None:
        scanner = ScriptScanner()
        lines = lines_of(OPTIONS_COMPONENT)

        assert scanner.scan(lines) == scanner.scan(lines)
