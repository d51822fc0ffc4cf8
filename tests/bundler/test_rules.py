"""
Unit tests for rule configuration and loader chain resolution.
"""

import pytest

from bundler.errors import ConfigurationError, LoaderResolutionError
from bundler.rules.loaders import LoaderRegistry
from bundler.rules.rules import RuleConfig, Rules, parse_rules


def noop(context, options):
    return None


class TestRuleConfig:
    """Test suite for RuleConfig validation."""
    
    def test_string_fields_are_normalized_to_lists(self):
        rule = RuleConfig.model_validate({"test": r"\.js$", "exclude": "^vendor/", "use": "a-loader"})
        
        assert rule.test == [r"\.js$"]
        assert rule.exclude == ["^vendor/"]
        assert rule.include is None
        assert [spec.loader for spec in rule.use] == ["a-loader"]
    
    def test_use_accepts_mixed_entries(self):
        rule = RuleConfig.model_validate({
            "test": r"\.css$",
            "use": ["a-loader", {"loader": "b-loader", "options": {"x": 1}}],
        })
        
        assert [spec.loader for spec in rule.use] == ["a-loader", "b-loader"]
        assert rule.use[1].options == {"x": 1}
    
    def test_invalid_regex_is_reported(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_rules([{"test": "(unclosed", "use": "a-loader"}])
        
        assert "rules[0].test" in exc_info.value.errors[0]
        assert "invalid regular expression" in exc_info.value.errors[0]
    
    def test_unknown_keys_are_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_rules([{"test": "x", "use": "a-loader", "loaders": []}])
        
        assert any("rules[0].loaders" in e for e in exc_info.value.errors)
    
    def test_missing_test_is_rejected(self):
        with pytest.raises(ConfigurationError):
            parse_rules([{"use": "a-loader"}])


class TestRules:
    """Test suite for Rules."""
    
    def setup_method(self):
        self.registry = LoaderRegistry({"a-loader": noop, "b-loader": noop, "c-loader": noop})
    
    def make_rules(self, tmp_path, raw_rules):
        return Rules(tmp_path, raw_rules, registry=self.registry)
    
    def test_chain_concatenates_matching_rules_in_order(self, tmp_path):
        rules = self.make_rules(tmp_path, [
            {"test": r"\.js$", "use": ["a-loader", "b-loader"]},
            {"test": r"\.css$", "use": "c-loader"},
            {"test": r"^src/", "use": {"loader": "c-loader", "options": {"n": 1}}},
        ])
        
        loaders = rules.loaders_for_file(tmp_path / "src" / "index.js")
        
        assert [l.use for l in loaders] == ["a-loader", "b-loader", "c-loader"]
        assert loaders[2].options == {"n": 1}
        assert loaders[0].exec is noop
    
    def test_no_matching_rule_gives_empty_chain(self, tmp_path):
        rules = self.make_rules(tmp_path, [{"test": r"\.css$", "use": "a-loader"}])
        
        assert rules.loaders_for_file(tmp_path / "src" / "index.js") == []
    
    def test_include_restricts_matches(self, tmp_path):
        rules = self.make_rules(tmp_path, [
            {"test": r"\.js$", "include": "^src/", "use": "a-loader"},
        ])
        
        assert len(rules.loaders_for_file(tmp_path / "src" / "a.js")) == 1
        assert rules.loaders_for_file(tmp_path / "lib" / "a.js") == []
    
    def test_exclude_removes_matches(self, tmp_path):
        rules = self.make_rules(tmp_path, [
            {"test": r"\.js$", "exclude": ["^node_modules/", r"\.min\.js$"], "use": "a-loader"},
        ])
        
        assert len(rules.loaders_for_file(tmp_path / "src" / "a.js")) == 1
        assert rules.loaders_for_file(tmp_path / "src" / "a.min.js") == []
        assert rules.loaders_for_file(tmp_path / "node_modules" / "x" / "a.js") == []
    
    def test_paths_are_matched_project_relative(self, tmp_path):
        rules = self.make_rules(tmp_path, [{"test": "^src/index\\.js$", "use": "a-loader"}])
        
        assert len(rules.loaders_for_file(str(tmp_path / "src" / "index.js"))) == 1
    
    def test_unknown_loader_fails_eagerly(self, tmp_path):
        with pytest.raises(LoaderResolutionError) as exc_info:
            self.make_rules(tmp_path, [{"test": "x", "use": "missing-loader"}])
        
        assert exc_info.value.loader == "missing-loader"
    
    def test_no_rules(self, tmp_path):
        rules = self.make_rules(tmp_path, None)
        
        assert len(rules) == 0
        assert rules.loaders_for_file(tmp_path / "a.js") == []
