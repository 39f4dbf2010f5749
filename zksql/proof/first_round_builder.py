"""
1차 라운드 빌더 (FirstRoundBuilder)
=====================================

평문 패스에서 플랜이 선언하는 정보를 모은다. 여기서는 아무것도 커밋하지 않는다.

  - range_length: 섬체크 도메인이 담아야 할 최대 행 수
  - num_post_result_challenges: 결과를 바인딩한 뒤에 뽑을 챌린지 수
  - chi_evaluation_lengths: 새로 생기는 출력 길이 (예: 필터의 m)
"""


class FirstRoundBuilder:
    def __init__(self, initial_range_length=0):
        self.range_length = initial_range_length
        self.num_post_result_challenges = 0
        self.chi_evaluation_lengths = []

    def update_range_length(self, length):
        self.range_length = max(self.range_length, length)

    def request_post_result_challenges(self, count):
        self.num_post_result_challenges += count

    def produce_chi_evaluation_length(self, length):
        self.update_range_length(length)
        self.chi_evaluation_lengths.append(length)
