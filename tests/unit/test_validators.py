"""
Unit tests for provisioning form helpers.
"""

import pytest

from app.core.exceptions import ValidationError
from app.features.tenants.validators import (
    check_required_fields,
    generate_slug,
    suggest_fields,
)

VALID_FORM = {
    "name": "Loja X",
    "slug": "loja-x",
    "admin_email": "a@x.com",
    "admin_name": "Admin X",
    "admin_password": "senha123",
    "contract_duration_days": 30,
}


@pytest.mark.unit
class TestSlugGeneration:

    @pytest.mark.parametrize(
        "name, slug",
        [
            ("Loja X", "loja-x"),
            ("Café & Cia  Ltda", "cafe-cia-ltda"),
            ("  Açaí do João  ", "acai-do-joao"),
            ("Loja--Nova!!", "loja-nova"),
            ("Ótica 2000", "otica-2000"),
            ("!!!", ""),
            ("&&&", ""),
        ],
    )
    def test_generate_slug(self, name, slug):
        assert generate_slug(name) == slug

    def test_suggestions(self):
        suggestions = suggest_fields("Café Central")

        assert suggestions.slug == "cafe-central"
        assert suggestions.admin_email == "admin@cafecentral.com"
        assert suggestions.admin_name == "Administrador - Café Central"


@pytest.mark.unit
class TestRequiredFields:

    def test_valid_form_passes(self):
        check_required_fields(**VALID_FORM)

    @pytest.mark.parametrize(
        "field, value, message",
        [
            ("name", "   ", "Nome da loja é obrigatório"),
            ("slug", "", "Slug é obrigatório"),
            ("admin_email", "", "Email do administrador é obrigatório"),
            ("admin_name", " ", "Nome do administrador é obrigatório"),
            ("admin_password", "12345", "Senha deve ter pelo menos 6 caracteres"),
            ("contract_duration_days", 0, "Duração do contrato deve ser de pelo menos 1 dia"),
            ("contract_duration_days", 36501, "Duração do contrato deve ser de no máximo 36500 dias"),
        ],
    )
    def test_first_failing_rule_message(self, field, value, message):
        with pytest.raises(ValidationError) as exc_info:
            check_required_fields(**{**VALID_FORM, field: value})

        assert exc_info.value.message == message

    def test_password_of_six_characters_is_enough(self):
        check_required_fields(**{**VALID_FORM, "admin_password": "123456"})

    def test_longest_contract_is_accepted(self):
        check_required_fields(**{**VALID_FORM, "contract_duration_days": 36500})

    @pytest.mark.parametrize(
        "slug",
        [
            "Minha Loja/../x?y",
            "loja x",
            "loja/x",
            "..",
            "loja?x",
            "loja_x",
            "-loja",
            "loja-",
            "loja--x",
            "açaí",
        ],
    )
    def test_rejects_slug_that_is_not_url_safe(self, slug):
        with pytest.raises(ValidationError) as exc_info:
            check_required_fields(**{**VALID_FORM, "slug": slug})

        assert exc_info.value.message == (
            "Slug deve conter apenas letras, números e hífens (ex.: minha-loja)"
        )

    @pytest.mark.parametrize("slug", ["Loja-X", "  loja-x  ", "otica-2000", "x"])
    def test_accepts_slug_after_normalization(self, slug):
        check_required_fields(**{**VALID_FORM, "slug": slug})

    def test_suggested_slug_always_passes(self):
        slug = suggest_fields("Café & Cia  Ltda").slug

        check_required_fields(**{**VALID_FORM, "slug": slug})
