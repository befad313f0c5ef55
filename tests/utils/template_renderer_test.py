import os
import tempfile
from unittest import TestCase, mock
from unittest.mock import Mock

from jinja2 import TemplateSyntaxError

from smoketesting.exceptions import InvalidSyntax, SystemSetupError
from smoketesting.utils.template_renderer import TemplateRenderer


class TemplateRendererTest(TestCase):
    def setUp(self):
        self.root_path = "fake"
        self.variables = {}
        self.file_name = "non-existent.txt"
        self.template_renderer = TemplateRenderer()

    @mock.patch('jinja2.Environment.get_template')
    def test_successful_render(self, get_template):
        template = Mock()
        get_template.return_value = template
        template.render.return_value = "template as string"

        rendered = self.template_renderer.render_template_file(self.root_path, self.variables, self.file_name)

        self.assertEqual("template as string\n", rendered)

    def test_render_template_from_directory(self):
        with tempfile.TemporaryDirectory() as root_path:
            with open(os.path.join(root_path, "node.conf.j2"), "wt", encoding="utf-8") as f:
                f.write('{ "rpcAddress": {{ (host ~ ":" ~ port) | tojson }} }')

            rendered = self.template_renderer.render_template_file(root_path, {"host": "localhost", "port": 10005},
                                                                   "node.conf.j2")

        self.assertEqual('{ "rpcAddress": "localhost:10005" }\n', rendered)

    def test_undefined_variable(self):
        with tempfile.TemporaryDirectory() as root_path:
            with open(os.path.join(root_path, "node.conf.j2"), "wt", encoding="utf-8") as f:
                f.write("{{ rpc_port }}")

            with self.assertRaises(SystemSetupError):
                self.template_renderer.render_template_file(root_path, self.variables, "node.conf.j2")

    def test_missing_template(self):
        with tempfile.TemporaryDirectory() as root_path:
            with self.assertRaisesRegex(SystemSetupError, "Cannot find template"):
                self.template_renderer.render_template_file(root_path, self.variables, self.file_name)

    @mock.patch('jinja2.Environment.get_template')
    def test_template_syntax_error(self, get_template):
        get_template.side_effect = TemplateSyntaxError("fake", 12)

        with self.assertRaises(InvalidSyntax):
            self.template_renderer.render_template_file(self.root_path, self.variables, self.file_name)

    @mock.patch('jinja2.Environment.get_template')
    def test_unknown_error(self, get_template):
        template = Mock()
        get_template.return_value = template
        template.render.side_effect = RuntimeError()

        with self.assertRaises(SystemSetupError):
            self.template_renderer.render_template_file(self.root_path, self.variables, self.file_name)
