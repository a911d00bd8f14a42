from typing import List

from rentmzansi.services.base import StoreService


class FavoriteService(StoreService):
    """Favorited listing keys; the price-drop check runs over these"""

    def get_favorites(self) -> List[str]:
        return [i for i in self.store.read_json(self.keys.favorites, []) if isinstance(i, str)]

    def is_favorite(self, listing_id: str) -> bool:
        return listing_id in self.get_favorites()

    def toggle_favorite(self, listing_id: str) -> bool:
        """Add or remove a favorite. Returns whether the listing is now a favorite"""
        favorites = self.get_favorites()

        if listing_id in favorites:
            favorites.remove(listing_id)
            now_favorite = False
        else:
            favorites.append(listing_id)
            now_favorite = True

        if not self.store.write_json(self.keys.favorites, favorites):
            return not now_favorite

        return now_favorite
