"""Material Design icons via QtAwesome."""
import qtawesome as qta

from photo_framer.gui.styles.theme import get_colors


class MaterialIcons:
    """Centralized Material Design icon definitions using QtAwesome."""

    # Flow actions
    @staticmethod
    def upload(color=None):
        """Choose photo icon."""
        return qta.icon('mdi6.image-plus', color=color or get_colors().TEXT_ON_PRIMARY)

    @staticmethod
    def crop(color=None):
        """Confirm crop icon."""
        return qta.icon('mdi6.crop', color=color or get_colors().TEXT_ON_PRIMARY)

    @staticmethod
    def download(color=None):
        """Download icon."""
        return qta.icon('mdi6.download', color=color or get_colors().TEXT_ON_PRIMARY)

    @staticmethod
    def refresh():
        """Start over icon."""
        return qta.icon('mdi6.refresh', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def edit():
        """Adjust crop icon."""
        return qta.icon('mdi6.pencil-outline', color=get_colors().TEXT_SECONDARY)

    # Crop controls
    @staticmethod
    def zoom_in():
        return qta.icon('mdi6.magnify-plus-outline', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def zoom_out():
        return qta.icon('mdi6.magnify-minus-outline', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def reset():
        return qta.icon('mdi6.restore', color=get_colors().TEXT_SECONDARY)

    # Console / menus
    @staticmethod
    def folder_open():
        """Browse/Open folder icon."""
        return qta.icon('mdi6.folder-open-outline', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def frame():
        """Choose frame icon."""
        return qta.icon('mdi6.image-frame', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def delete():
        """Clear/delete icon."""
        return qta.icon('mdi6.delete-outline', color=get_colors().ERROR)

    @staticmethod
    def content_copy():
        """Copy icon."""
        return qta.icon('mdi6.content-copy', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def content_save():
        """Save icon."""
        return qta.icon('mdi6.content-save-outline', color=get_colors().TEXT_SECONDARY)
