#!/usr/bin/env python3
"""
Generate the create form of one or more entity types and save it as JSON.

Useful to see what an exemplar produces before pointing a front end at it.

Usage:
    python scripts/export_form_schema.py Human
    python scripts/export_form_schema.py Human Archaeological_Site
"""

import sys
from pathlib import Path

from wikibase_forms.models.config.forms_config import load_forms_config
from wikibase_forms.models.config.settings import settings
from wikibase_forms.models.errors import FormGeneratorError
from wikibase_forms.services.form_generator import FormGenerator
from wikibase_forms.services.sparql.client import SparqlClient


def export_form(generator: FormGenerator, entity_type: str, output_dir: Path) -> None:
    """Generate the create form of an entity type and write it to <entity_type>.json"""
    print(f"Generating create form for {entity_type}...")
    generated = generator.generate_create_form(entity_type)

    output_path = output_dir / f"{entity_type}.json"
    output_path.write_text(generated.model_dump_json(by_alias=True, indent=2), encoding="utf-8")

    schema = generated.session.form_schema
    print(f"Saved to {output_path}")
    print(f"   Properties: {len(schema.properties)}")
    print(f"   With qualifiers: {sum(1 for p in schema.properties if p.has_qualifiers)}")


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python export_form_schema.py <entity_type> [entity_type2] ...")
        print("Example: python export_form_schema.py Human")
        sys.exit(1)

    config = load_forms_config(settings.forms_config_path)
    client = SparqlClient(
        config.sparql_endpoint,
        timeout=settings.sparql_timeout,
        max_retries=settings.sparql_max_retries,
        backoff_factor=settings.sparql_backoff_factor,
        user_agent=settings.user_agent,
    )
    generator = FormGenerator(client, config)

    output_dir = Path(__file__).parent.parent / "forms"
    output_dir.mkdir(parents=True, exist_ok=True)

    for entity_type in sys.argv[1:]:
        try:
            export_form(generator, entity_type, output_dir)
        except FormGeneratorError as e:
            print(f"\n❌ Error generating {entity_type}: {e}")
            sys.exit(1)
    client.close()


if __name__ == "__main__":
    main()
