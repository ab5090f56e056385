"""
Flask web application serving dialogue documents and resolution previews
"""

import asyncio
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from dialogue_engine.cli.validate_cmd import DialogueValidator
from dialogue_engine.engine.inventory import InventoryCache
from dialogue_engine.engine.resolver import DialogueResolver
from dialogue_engine.model.loader import DialogueLoader
from dialogue_engine.model.types import InventorySnapshot
from dialogue_engine.repository import DialogueRepository


class StaticInventoryService:
    """Inventory service answering with a fixed snapshot supplied by a request"""

    def __init__(self, snapshot: Optional[InventorySnapshot]):
        self.snapshot = snapshot

    async def get_inventory(self) -> Optional[InventorySnapshot]:
        return self.snapshot

    def write_slots(self, slots) -> None:
        pass


def resolve_preview(document, inventory: Any) -> Dict[str, Any]:
    """Resolve a document against an inventory payload and return JSON data"""
    service = StaticInventoryService(InventorySnapshot.from_dict(inventory))
    resolver = DialogueResolver(InventoryCache(service))
    resolution = asyncio.run(resolver.resolve(document))
    return {
        "id": document.id,
        "lines": [line.to_dict() for line in resolution.lines],
        "actions": [action.to_dict() for action in resolution.actions],
    }


def create_app(dialogues_root=None):
    """Create and configure the Flask application"""
    app = Flask(__name__)

    if dialogues_root is None:
        dialogues_root = Path.cwd() / "resources" / "dialogue"
    else:
        dialogues_root = Path(dialogues_root)

    app.config["DIALOGUES_ROOT"] = dialogues_root
    repository = DialogueRepository(dialogues_root)

    @app.route("/dialogue/<npc_id>.json")
    def get_dialogue(npc_id):
        """Raw dialogue document, as consumed by game clients"""
        document = repository.load(npc_id)
        if document is None:
            return jsonify({"error": "Dialogue not found"}), 404
        return jsonify(document.to_dict())

    @app.route("/api/dialogues")
    def list_dialogues():
        """List all dialogue documents with summary statistics"""
        dialogues = []
        for npc_id in repository.available_ids():
            loader = DialogueLoader()
            document = loader.parse_file(repository.path_for(npc_id))
            entry = {"id": npc_id, "valid": document is not None and not loader.errors}
            if document is not None:
                entry["stats"] = loader.get_stats(document)
            dialogues.append(entry)

        return jsonify({"dialogues": dialogues})

    @app.route("/api/resolve", methods=["POST"])
    def resolve_dialogue():
        """Resolve a dialogue for the posted inventory snapshot"""
        data = request.get_json(silent=True) or {}
        npc_id = data.get("npcId")
        if not npc_id:
            return jsonify({"error": "No npcId specified"}), 400

        document = repository.load(npc_id)
        if document is None:
            return jsonify({"error": "Dialogue not found"}), 404

        try:
            return jsonify(resolve_preview(document, data.get("inventory")))
        except Exception as e:
            return jsonify({"error": str(e)}), 500

    @app.route("/api/validate", methods=["POST"])
    def validate_dialogue():
        """Validate posted document content"""
        data = request.get_json(silent=True) or {}
        content = data.get("content", "")

        validator = DialogueValidator(quiet=True)
        valid = validator.validate_text(content)
        return jsonify(
            {
                "valid": valid,
                "errors": [issue.to_dict() for issue in validator.errors],
                "warnings": [issue.to_dict() for issue in validator.warnings],
                "stats": validator.stats,
            }
        )

    return app


def main():
    """Run the development server"""
    import argparse

    parser = argparse.ArgumentParser(description="Dialogue Engine Web Server")
    parser.add_argument("--dialogues", "-d", help="Path to dialogues directory", default=None)
    parser.add_argument("--port", "-p", help="Port to run on", type=int, default=5000)
    parser.add_argument("--debug", help="Run in debug mode", action="store_true")

    args = parser.parse_args()

    app = create_app(dialogues_root=args.dialogues)

    print(f"\n{'=' * 60}")
    print("🎭 Dialogue Engine Web Server")
    print(f"{'=' * 60}")
    print(f"\n📂 Dialogues directory: {app.config['DIALOGUES_ROOT']}")
    print(f"🌐 Server running at: http://localhost:{args.port}")
    print("\nPress Ctrl+C to stop\n")

    app.run(host="0.0.0.0", port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
